"""配置模块"""

from .container import Container, get_container, reset_container
from .paths import (
    get_cache_dir,
    get_config_dir,
    get_data_dir,
    get_error_log_file,
    get_log_dir,
    get_settings_file,
    get_token_cache_file,
)
from .settings import AppSettings, get_settings

__all__ = [
    "AppSettings",
    "Container",
    "get_cache_dir",
    "get_config_dir",
    "get_container",
    "get_data_dir",
    "get_error_log_file",
    "get_log_dir",
    "get_settings",
    "get_settings_file",
    "get_token_cache_file",
    "reset_container",
]
