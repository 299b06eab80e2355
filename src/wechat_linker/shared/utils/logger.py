"""日志 - 基于Loguru

控制台输出按命令行 --debug / 配置的级别过滤，文件 app.log 始终记录 DEBUG。
AppID 在写入日志前脱敏，AppSecret 不进入任何日志。
"""

import sys
import uuid
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from loguru import logger

from ..constants import LOG_FILE_NAME, LOG_RETENTION, LOG_ROTATION

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)


def mask_sensitive(value: str, visible_chars: int = 4) -> str:
    """
    保留首尾各 visible_chars 个字符，其余替换为 ***

    过短的值整体替换：mask_sensitive("wx1234567890abcdef") == "wx12***cdef"，
    mask_sensitive("short") == "***"。
    """
    if not value or len(value) <= visible_chars * 2:
        return "***"
    return f"{value[:visible_chars]}***{value[-visible_chars:]}"


def mask_app_id(app_id: str) -> str:
    """日志与命令行输出中使用的 AppID 形式"""
    if not app_id:
        return "[未配置]"
    return mask_sensitive(app_id)


def setup_logger(level: str = "INFO", log_to_file: bool = True, log_dir: Path | None = None) -> None:
    """
    重新配置日志输出

    Args:
        level: 控制台日志级别
        log_to_file: 是否同时写入 app.log
        log_dir: 日志目录，默认为平台数据目录下的 logs
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT, colorize=True)

    if not log_to_file:
        return

    if log_dir is None:
        from ...infrastructure.config.paths import get_log_dir

        log_dir = get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_dir / LOG_FILE_NAME,
        level="DEBUG",
        format=_FILE_FORMAT,
        rotation=LOG_ROTATION,
        retention=LOG_RETENTION,
        compression="zip",
        encoding="utf-8",
        enqueue=True,
    )


# -------------------- 批次 request_id --------------------


def set_request_id(request_id: str | None = None) -> str:
    """为当前批次设置 request_id（未指定时随机生成 8 位）"""
    request_id = request_id or uuid.uuid4().hex[:8]
    _request_id_var.set(request_id)
    return request_id


def get_request_id() -> str | None:
    return _request_id_var.get()


def clear_request_id() -> None:
    _request_id_var.set(None)


# -------------------- 结构化事件 --------------------


def log_event(event: str, level: str = "INFO", **fields: Any) -> None:
    """
    记录结构化事件

    字段通过 bind 写入 record["extra"]，消息中以 key=value 形式展示；
    存在 request_id 时自动附加。
    """
    request_id = get_request_id()
    if request_id:
        fields["request_id"] = request_id

    # 消息已格式化完毕，不能再让 loguru 解析其中的花括号
    message = f"[{event}] " + " ".join(f"{k}={v}" for k, v in fields.items())
    logger.bind(event=event, **fields).log(level.upper(), message)


def log_link_generated(
    app_id: str,
    path: str,
    env_version: str,
    duration_ms: int,
    success: bool = True,
    error: str | None = None,
) -> None:
    """单条 URL Link 的生成结果，失败记为 WARNING"""
    log_event(
        "urllink_generated",
        level="INFO" if success else "WARNING",
        app_id=mask_app_id(app_id),
        path=path[:100],
        env_version=env_version,
        duration_ms=duration_ms,
        success=success,
        error=error,
    )


def log_report_delivered(
    target: str,
    records: int,
    success: bool = True,
    error: str | None = None,
) -> None:
    """错误报告投递结果"""
    log_event(
        "error_report_delivered",
        level="INFO" if success else "WARNING",
        target=target,
        records=records,
        success=success,
        error=error,
    )


__all__ = [
    "logger",
    "setup_logger",
    "mask_sensitive",
    "mask_app_id",
    "set_request_id",
    "get_request_id",
    "clear_request_id",
    "log_event",
    "log_link_generated",
    "log_report_delivered",
]
