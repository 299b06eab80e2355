"""错误汇总器

进程内显式持有的错误收集器：捕获运行时故障（本地与远端报告的），
按捕获顺序保存在有界日志中，并可将日志提交到错误报告接收端。
"""

from __future__ import annotations

import traceback
from collections import deque
from collections.abc import Sequence

from loguru import logger

from ...domain.entities import ErrorRecord
from ...domain.value_objects import ErrorOrigin, ErrorSeverity
from ...shared.constants import DEFAULT_MAX_ERROR_RECORDS
from ...shared.exceptions import DeliveryError, ValidationError, wrap_exception
from ...shared.utils.logger import log_report_delivered
from ..ports.outbound import ErrorJournalPort, ReportDeliveryPort


class ErrorAggregator:
    """
    错误汇总器

    - capture: 追加记录，永不抛出异常
    - clear: 清空日志
    - report: 提交当前日志，不自动清空（由调用方在成功后清空）

    日志超出 max_records 时丢弃最早的记录。
    提供 journal 时，启动时读取历史记录，每次变更后尽力写回。
    """

    def __init__(
        self,
        delivery: ReportDeliveryPort | None = None,
        journal: ErrorJournalPort | None = None,
        max_records: int = DEFAULT_MAX_ERROR_RECORDS,
    ):
        if max_records <= 0:
            raise ValueError("max_records 必须为正数")
        self._delivery = delivery
        self._journal = journal
        self._records: deque[ErrorRecord] = deque(maxlen=max_records)

        if journal is not None:
            try:
                self._records.extend(journal.load())
            except Exception as e:
                logger.warning(f"读取错误日志失败，已忽略: {e}")

    @property
    def records(self) -> tuple[ErrorRecord, ...]:
        """按捕获顺序的记录快照"""
        return tuple(self._records)

    @property
    def max_records(self) -> int:
        return self._records.maxlen or DEFAULT_MAX_ERROR_RECORDS

    def __len__(self) -> int:
        return len(self._records)

    def capture(
        self,
        message: str,
        stack: str | None = None,
        origin: ErrorOrigin = ErrorOrigin.LOCAL,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
    ) -> ErrorRecord:
        """
        捕获一条错误

        Args:
            message: 简要描述
            stack: 详细信息（可选）
            origin: 错误来源
            severity: 错误级别

        Returns:
            新生成的错误记录
        """
        record = ErrorRecord(
            message=_safe_text(message) or "未知错误",
            stack=stack,
            origin=_coerce(ErrorOrigin, origin, ErrorOrigin.LOCAL),
            severity=_coerce(ErrorSeverity, severity, ErrorSeverity.ERROR),
        )
        self._records.append(record)

        # 以下副作用失败都不能影响捕获本身
        try:
            logger.opt(depth=1).log(
                record.severity.log_level,
                f"[{record.origin.value}] {record.message}",
            )
        except Exception:
            pass
        self._persist()
        return record

    def capture_exception(
        self,
        exc: BaseException,
        origin: ErrorOrigin = ErrorOrigin.LOCAL,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
    ) -> ErrorRecord:
        """捕获异常对象，堆栈写入 stack"""
        try:
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        except Exception:
            stack = None
        message = str(exc) or type(exc).__name__
        return self.capture(message, stack=stack, origin=origin, severity=severity)

    def clear(self) -> None:
        """清空日志"""
        self._records.clear()
        self._persist()

    async def report(self, contact: str) -> None:
        """
        提交当前日志与联系方式

        成功后不会自动清空日志。

        Raises:
            ValidationError: 联系方式为空
            DeliveryError: 未配置投递目标、传输失败或接收端返回非成功状态
        """
        contact = (contact or "").strip()
        if not contact:
            raise ValidationError("请填写联系方式", details={"field": "contact"})
        if self._delivery is None:
            raise DeliveryError("未配置错误报告投递方式")

        records = self.records
        try:
            await self._delivery.deliver(contact, records)
        except Exception as e:
            log_report_delivered(self._delivery.name, len(records), success=False, error=str(e))
            error = wrap_exception(e, DeliveryError, f"错误报告发送失败: {e}")
            if error is e:
                raise
            raise error from e

        log_report_delivered(self._delivery.name, len(records))

    def _persist(self) -> None:
        if self._journal is None:
            return
        try:
            self._journal.save(self.records)
        except Exception as e:
            try:
                logger.debug(f"写入错误日志失败: {e}")
            except Exception:
                pass


def _safe_text(value: object) -> str:
    try:
        return str(value)
    except Exception:
        return repr(type(value))


def _coerce(enum_cls, value, fallback):
    try:
        return enum_cls(value)
    except ValueError:
        return fallback


def summarize_records(records: Sequence[ErrorRecord]) -> dict[str, int]:
    """按级别统计记录数量"""
    counts = {severity.value: 0 for severity in ErrorSeverity}
    for record in records:
        counts[record.severity.value] += 1
    return counts
