"""共享工具"""

from datetime import datetime, timezone

from .logger import (
    log_event,
    logger,
    mask_app_id,
    mask_sensitive,
    set_request_id,
    setup_logger,
)


def utc_now() -> datetime:
    """返回当前 UTC 时间（带时区信息），替代 datetime.now() 的无时区调用"""
    return datetime.now(timezone.utc)


def to_epoch_millis(value: datetime) -> int:
    """datetime 转毫秒时间戳"""
    return int(value.timestamp() * 1000)


def from_epoch_millis(value: int | float) -> datetime:
    """毫秒时间戳转 UTC datetime"""
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


__all__ = [
    # Logger
    "logger",
    "setup_logger",
    "log_event",
    "mask_sensitive",
    "mask_app_id",
    "set_request_id",
    # Datetime
    "utc_now",
    "to_epoch_millis",
    "from_epoch_millis",
]
