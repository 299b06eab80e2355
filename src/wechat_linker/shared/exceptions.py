"""自定义异常类

包含：
- 错误码枚举 (ErrorCode)
- 分层异常类（应用层、基础设施层）
- 用户友好的错误消息
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """错误码枚举

    错误码范围：
    - 1xxx: 通用错误
    - 2xxx: 前置条件错误
    - 3xxx: 微信接口错误
    - 4xxx: 错误报告投递错误
    - 5xxx: 存储错误
    - 6xxx: 配置错误
    """

    # 通用错误 1xxx
    UNKNOWN_ERROR = (1000, "未知错误")
    INVALID_INPUT = (1001, "输入无效")
    NOT_FOUND = (1002, "记录不存在")

    # 前置条件错误 2xxx
    PRECONDITION_FAILED = (2000, "前置条件不满足")
    NO_PROFILE_SELECTED = (2001, "请选择一个小程序")
    NO_VALID_ITEMS = (2002, "请至少填写一个路径")

    # 微信接口错误 3xxx
    LINK_EXCHANGE_ERROR = (3000, "生成 URL Link 失败")
    ACCESS_TOKEN_ERROR = (3001, "获取 access_token 失败")

    # 错误报告投递错误 4xxx
    DELIVERY_ERROR = (4000, "错误报告发送失败")

    # 存储错误 5xxx
    STORAGE_ERROR = (5000, "存储操作失败")
    STORAGE_READ_ERROR = (5001, "读取数据失败")
    STORAGE_WRITE_ERROR = (5002, "写入数据失败")

    # 配置错误 6xxx
    CONFIG_ERROR = (6000, "配置错误")

    def __init__(self, code: int, message: str):
        self._code = code
        self._message = message

    @property
    def code(self) -> int:
        """错误码"""
        return self._code

    @property
    def message(self) -> str:
        """错误消息"""
        return self._message

    def __str__(self) -> str:
        return f"[{self._code}] {self._message}"


class LinkerError(Exception):
    """基础异常类

    所有自定义异常的基类，支持错误码和详细信息。
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str | None = None,
        *,
        error_code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        self._error_code = error_code or self.error_code
        self._message = message or self._error_code.message
        self._details = details or {}
        self._cause = cause

        super().__init__(self._message)

    @property
    def code(self) -> int:
        """错误码"""
        return self._error_code.code

    @property
    def user_message(self) -> str:
        """用户友好的错误消息"""
        return self._message

    @property
    def details(self) -> dict[str, Any]:
        """详细信息"""
        return self._details

    @property
    def cause(self) -> Exception | None:
        """原始异常"""
        return self._cause

    def to_dict(self) -> dict[str, Any]:
        """转换为字典（用于API响应或日志）"""
        return {
            "error_code": self._error_code.code,
            "error_type": self._error_code.name,
            "message": self._message,
            "details": self._details,
        }

    def __str__(self) -> str:
        return f"[{self._error_code.code}] {self._message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self._error_code.code}, message={self._message!r})"


# ============ 应用层异常 ============


class ApplicationError(LinkerError):
    """应用层异常基类"""


class ValidationError(ApplicationError):
    """验证异常（用户输入有误，可在界面上就地提示）"""

    error_code = ErrorCode.INVALID_INPUT


class NotFoundError(ApplicationError):
    """记录不存在（引用完整性被破坏，通常是调用方或状态错误）"""

    error_code = ErrorCode.NOT_FOUND


class PreconditionError(ApplicationError):
    """批量生成的前置条件不满足，未发起任何远程调用"""

    error_code = ErrorCode.PRECONDITION_FAILED


class NoProfileSelectedError(PreconditionError):
    """未选择小程序配置，或配置不存在"""

    error_code = ErrorCode.NO_PROFILE_SELECTED


class NoValidItemsError(PreconditionError):
    """过滤后没有有效的路径"""

    error_code = ErrorCode.NO_VALID_ITEMS


# ============ 基础设施层异常 ============


class InfrastructureError(LinkerError):
    """基础设施异常基类"""


class PersistenceError(InfrastructureError):
    """持久化失败，内存状态保持上一次提交的快照"""

    error_code = ErrorCode.STORAGE_ERROR


class StorageReadError(PersistenceError):
    """存储读取异常"""

    error_code = ErrorCode.STORAGE_READ_ERROR


class StorageWriteError(PersistenceError):
    """存储写入异常"""

    error_code = ErrorCode.STORAGE_WRITE_ERROR


class DeliveryError(InfrastructureError):
    """错误报告未送达，日志保留以便重试"""

    error_code = ErrorCode.DELIVERY_ERROR


class LinkExchangeError(InfrastructureError):
    """URL Link 生成失败

    Attributes:
        errcode: 微信接口返回的错误码（传输层故障时为 None）
        remote: 是否由微信接口主动返回的错误
    """

    error_code = ErrorCode.LINK_EXCHANGE_ERROR

    def __init__(
        self,
        message: str | None = None,
        *,
        errcode: int | None = None,
        remote: bool = False,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.errcode = errcode
        self.remote = remote


class AccessTokenError(LinkExchangeError):
    """access_token 获取失败"""

    error_code = ErrorCode.ACCESS_TOKEN_ERROR


class ConfigError(InfrastructureError):
    """配置异常"""

    error_code = ErrorCode.CONFIG_ERROR


# ============ 工具函数 ============


def wrap_exception(
    exc: Exception,
    error_class: type[LinkerError] = LinkerError,
    message: str | None = None,
) -> LinkerError:
    """将普通异常包装为 LinkerError

    Args:
        exc: 原始异常
        error_class: 目标异常类
        message: 自定义消息（可选）

    Returns:
        包装后的异常
    """
    if isinstance(exc, error_class):
        return exc

    return error_class(
        message=message or str(exc),
        cause=exc,
    )
