"""错误报告投递出站端口"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ....domain.entities import ErrorRecord


@runtime_checkable
class ReportDeliveryPort(Protocol):
    """
    错误报告投递端口

    将错误记录连同联系方式提交到报告接收端。
    """

    @property
    def name(self) -> str:
        """投递目标名称（用于日志）"""
        ...

    async def deliver(self, contact: str, records: Sequence[ErrorRecord]) -> None:
        """
        投递错误报告

        Args:
            contact: 联系方式（通常是邮箱）
            records: 错误记录，按捕获顺序

        Raises:
            DeliveryError: 传输失败或接收端返回非成功状态
        """
        ...
