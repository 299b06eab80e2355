"""错误记录实体"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4

from ...shared.utils import utc_now
from ..value_objects import ErrorOrigin, ErrorSeverity


@dataclass(frozen=True)
class ErrorRecord:
    """
    错误记录

    Attributes:
        message: 简要描述
        stack: 详细信息（如堆栈），可选
        origin: 错误被观察到的位置
        severity: 错误级别
        id: 捕获时生成的唯一标识
        timestamp: 捕获时间
    """

    message: str
    stack: str | None = None
    origin: ErrorOrigin = ErrorOrigin.LOCAL
    severity: ErrorSeverity = ErrorSeverity.ERROR
    id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "message": self.message,
            "stack": self.stack,
            "origin": self.origin.value,
            "severity": self.severity.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ErrorRecord:
        return cls(
            id=str(data.get("id") or uuid4()),
            timestamp=(
                datetime.fromisoformat(data["timestamp"]) if data.get("timestamp") else utc_now()
            ),
            message=str(data.get("message", "")),
            stack=data.get("stack"),
            origin=ErrorOrigin(data.get("origin", ErrorOrigin.LOCAL.value)),
            severity=ErrorSeverity(data.get("severity", ErrorSeverity.ERROR.value)),
        )
