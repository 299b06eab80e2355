"""配置管理 - 基于Pydantic Settings

环境变量使用 WECHAT_LINKER_ 前缀，嵌套字段以双下划线分隔，
例如 WECHAT_LINKER_REPORT__ENDPOINT。当前目录下的 .env 文件同样生效。
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ...domain.value_objects import EnvVersion
from ...shared.constants import (
    DEFAULT_MAX_ERROR_RECORDS,
    DEFAULT_TIMEOUT,
    TOKEN_REFRESH_MARGIN,
    WECHAT_API_BASE_URL,
)


class WechatApiSettings(BaseSettings):
    """微信开放接口配置"""

    api_base_url: str = Field(default=WECHAT_API_BASE_URL, description="接口基础URL")
    timeout: float = Field(default=DEFAULT_TIMEOUT, description="请求超时秒数")
    token_refresh_margin: int = Field(
        default=TOKEN_REFRESH_MARGIN,
        description="access_token 剩余有效期低于该秒数时重新获取",
    )
    token_cache_enabled: bool = Field(default=True, description="是否把 access_token 缓存到磁盘")
    proxy: str | None = Field(default=None, description="代理服务器地址")


class LinkSettings(BaseSettings):
    """URL Link 生成配置"""

    default_env_version: EnvVersion = Field(
        default=EnvVersion.RELEASE,
        description="默认小程序版本 (release, develop, trial)",
    )
    max_concurrency: int = Field(
        default=1,
        ge=1,
        description="单次批量的最大并发调用数（1 表示严格顺序）",
    )


class ReportSettings(BaseSettings):
    """错误报告配置"""

    endpoint: str | None = Field(
        default=None,
        description="错误报告接收地址（未配置时报告写入日志目录）",
    )
    timeout: float = Field(default=DEFAULT_TIMEOUT, description="投递超时秒数")


class ErrorLogSettings(BaseSettings):
    """错误日志配置"""

    max_records: int = Field(
        default=DEFAULT_MAX_ERROR_RECORDS,
        ge=1,
        description="最多保留的错误记录数",
    )
    persist: bool = Field(default=True, description="是否把错误记录保存到 errors.json")


class StorageSettings(BaseSettings):
    """存储配置"""

    settings_file: str | None = Field(
        default=None,
        description="小程序配置文件路径（默认使用平台配置目录下的 settings.json）",
    )


class AppSettings(BaseSettings):
    """主应用配置"""

    model_config = SettingsConfigDict(
        env_prefix="WECHAT_LINKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # 基本设置
    debug: bool = Field(default=False, description="调试模式")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="日志级别",
    )

    # 子配置
    wechat: WechatApiSettings = Field(default_factory=WechatApiSettings)
    link: LinkSettings = Field(default_factory=LinkSettings)
    report: ReportSettings = Field(default_factory=ReportSettings)
    error_log: ErrorLogSettings = Field(default_factory=ErrorLogSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache
def get_settings() -> AppSettings:
    """获取应用配置（单例）"""
    return AppSettings()
