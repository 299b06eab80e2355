"""封闭枚举值对象

环境版本、错误来源与错误级别均使用枚举表示，不接受自由字符串。
"""

from __future__ import annotations

from enum import Enum

from ...shared.exceptions import ValidationError


class EnvVersion(str, Enum):
    """小程序版本（URL Link 打开的环境）"""

    RELEASE = "release"  # 正式版
    DEVELOP = "develop"  # 开发版
    TRIAL = "trial"  # 体验版

    @classmethod
    def parse(cls, value: EnvVersion | str) -> EnvVersion:
        """从字符串解析，仅校验是否属于集合

        Raises:
            ValidationError: 不是合法的版本
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            allowed = ", ".join(v.value for v in cls)
            raise ValidationError(
                f"无效的小程序版本: {value!r}（可选: {allowed}）",
                details={"env_version": value},
            ) from e

    @property
    def label(self) -> str:
        return {
            EnvVersion.RELEASE: "正式版",
            EnvVersion.DEVELOP: "开发版",
            EnvVersion.TRIAL: "体验版",
        }[self]


class ErrorOrigin(str, Enum):
    """错误被观察到的位置"""

    LOCAL = "local"  # 本地调用失败
    REMOTE = "remote"  # 远端主动返回的错误


class ErrorSeverity(str, Enum):
    """错误级别"""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def log_level(self) -> str:
        """对应的 loguru 日志级别"""
        return {
            ErrorSeverity.ERROR: "ERROR",
            ErrorSeverity.WARNING: "WARNING",
            ErrorSeverity.INFO: "INFO",
        }[self]
