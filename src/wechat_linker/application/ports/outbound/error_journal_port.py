"""错误日志持久化出站端口"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ....domain.entities import ErrorRecord


@runtime_checkable
class ErrorJournalPort(Protocol):
    """错误日志存储端口（跨进程保留尚未上报的错误）"""

    def load(self) -> list[ErrorRecord]:
        """读取已保存的错误记录"""
        ...

    def save(self, records: Sequence[ErrorRecord]) -> None:
        """覆盖保存全部错误记录"""
        ...
