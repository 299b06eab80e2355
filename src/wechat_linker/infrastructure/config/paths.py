"""跨平台路径管理

遵循各平台标准路径规范（基于 platformdirs）：
- Windows: AppData/Local
- macOS: ~/Library/Application Support, ~/Library/Caches
- Linux: ~/.config, ~/.cache, ~/.local/share (XDG规范)
"""

from __future__ import annotations

from pathlib import Path

import platformdirs

from ...shared.constants import (
    APP_AUTHOR,
    APP_DIR_NAME,
    ERROR_LOG_FILE_NAME,
    SETTINGS_FILE_NAME,
    TOKEN_CACHE_FILE_NAME,
)


def get_config_dir() -> Path:
    """获取配置目录

    Windows: C:/Users/<user>/AppData/Local/WechatLinker/WechatLinker
    macOS: ~/Library/Application Support/WechatLinker
    Linux: ~/.config/WechatLinker
    """
    config_dir = Path(platformdirs.user_config_dir(APP_DIR_NAME, APP_AUTHOR))
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_cache_dir() -> Path:
    """获取缓存目录"""
    cache_dir = Path(platformdirs.user_cache_dir(APP_DIR_NAME, APP_AUTHOR))
    cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir


def get_data_dir() -> Path:
    """获取数据目录"""
    data_dir = Path(platformdirs.user_data_dir(APP_DIR_NAME, APP_AUTHOR))
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_log_dir() -> Path:
    """获取日志目录"""
    log_dir = get_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def get_settings_file() -> Path:
    """小程序配置文件 settings.json"""
    return get_config_dir() / SETTINGS_FILE_NAME


def get_token_cache_file() -> Path:
    """access_token 缓存文件"""
    return get_cache_dir() / TOKEN_CACHE_FILE_NAME


def get_error_log_file() -> Path:
    """错误日志文件 errors.json"""
    return get_log_dir() / ERROR_LOG_FILE_NAME
