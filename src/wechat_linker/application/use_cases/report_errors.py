"""提交错误报告用例"""

from __future__ import annotations

from loguru import logger

from ..services import ErrorAggregator


class ReportErrorsUseCase:
    """
    提交错误报告

    先提交，成功后清空日志；失败时保留日志并把 DeliveryError 交给调用方，
    以便用户手动重试。
    """

    def __init__(self, errors: ErrorAggregator):
        self._errors = errors

    async def execute(self, contact: str) -> int:
        """
        提交错误报告

        Args:
            contact: 联系方式

        Returns:
            已提交的记录数

        Raises:
            ValidationError: 联系方式为空
            DeliveryError: 投递失败（日志保持不变）
        """
        count = len(self._errors)
        await self._errors.report(contact)
        self._errors.clear()
        logger.info(f"错误报告已提交，共 {count} 条，日志已清空")
        return count
