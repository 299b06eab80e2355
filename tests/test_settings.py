"""配置测试"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from wechat_linker.domain.value_objects import EnvVersion
from wechat_linker.infrastructure.config.settings import AppSettings, LinkSettings, get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch, tmp_path):
    """每个测试在空目录中运行并清空配置缓存"""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("WECHAT_LINKER_REPORT__ENDPOINT", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.mark.unit
def test_defaults() -> None:
    settings = AppSettings()

    assert settings.wechat.api_base_url == "https://api.weixin.qq.com"
    assert settings.wechat.token_refresh_margin == 60
    assert settings.link.default_env_version is EnvVersion.RELEASE
    assert settings.link.max_concurrency == 1
    assert settings.error_log.max_records == 100
    assert settings.report.endpoint is None


@pytest.mark.unit
def test_nested_env_variables(monkeypatch) -> None:
    monkeypatch.setenv("WECHAT_LINKER_LINK__DEFAULT_ENV_VERSION", "trial")
    monkeypatch.setenv("WECHAT_LINKER_LINK__MAX_CONCURRENCY", "4")
    monkeypatch.setenv("WECHAT_LINKER_REPORT__ENDPOINT", "https://reports.example.com/e")

    settings = AppSettings()

    assert settings.link.default_env_version is EnvVersion.TRIAL
    assert settings.link.max_concurrency == 4
    assert settings.report.endpoint == "https://reports.example.com/e"


@pytest.mark.unit
def test_max_concurrency_must_be_positive() -> None:
    with pytest.raises(PydanticValidationError):
        LinkSettings(max_concurrency=0)


@pytest.mark.unit
def test_dotenv_file_is_read(tmp_path) -> None:
    (tmp_path / ".env").write_text(
        "# 错误报告\nWECHAT_LINKER_REPORT__ENDPOINT=https://dotenv.example.com/report\n",
        encoding="utf-8",
    )

    assert get_settings().report.endpoint == "https://dotenv.example.com/report"


@pytest.mark.unit
def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
