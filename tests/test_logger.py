"""日志工具测试"""

import sys

import pytest
from loguru import logger

from wechat_linker.shared.constants import LOG_FILE_NAME
from wechat_linker.shared.utils.logger import (
    clear_request_id,
    get_request_id,
    log_event,
    log_link_generated,
    mask_app_id,
    mask_sensitive,
    set_request_id,
    setup_logger,
)


@pytest.fixture
def captured():
    """捕获 loguru 输出"""
    messages: list = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{message}")
    yield messages
    logger.remove(handler_id)


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [("wx1234567890abcdef", "wx12***cdef"), ("short", "***"), ("", "***")],
)
def test_mask_sensitive(value: str, expected: str) -> None:
    assert mask_sensitive(value) == expected


@pytest.mark.unit
def test_mask_app_id_unset() -> None:
    assert mask_app_id("") == "[未配置]"


@pytest.mark.unit
def test_request_id_attached_to_events(captured) -> None:
    request_id = set_request_id("abc123")
    try:
        log_event("custom_event", detail="x")
    finally:
        clear_request_id()

    assert request_id == "abc123"
    assert get_request_id() is None
    assert captured[0].record["extra"]["request_id"] == "abc123"
    assert "detail=x" in captured[0]


@pytest.mark.unit
def test_braces_in_values_are_not_formatted(captured) -> None:
    log_event("custom_event", query="a={b}")

    assert "query=a={b}" in captured[0]


@pytest.mark.unit
def test_link_event_masks_app_id(captured) -> None:
    log_link_generated("wx1234567890abcdef", "pages/index", "release", 12, success=False, error="boom")

    message = captured[0]
    assert "wx1234567890abcdef" not in message
    assert "wx12***cdef" in message
    assert message.record["level"].name == "WARNING"


@pytest.mark.unit
def test_request_id_generated_when_missing() -> None:
    try:
        request_id = set_request_id()
        assert len(request_id) == 8
        assert get_request_id() == request_id
    finally:
        clear_request_id()


@pytest.mark.unit
def test_setup_logger_writes_file_sink(tmp_path) -> None:
    setup_logger(level="WARNING", log_to_file=True, log_dir=tmp_path / "logs")
    try:
        logger.debug("file only")
        logger.complete()
    finally:
        logger.remove()
        logger.add(sys.stderr)

    log_file = tmp_path / "logs" / LOG_FILE_NAME
    assert "file only" in log_file.read_text(encoding="utf-8")
