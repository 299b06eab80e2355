"""文件错误报告投递

未配置接收地址时，把纯文本报告写入日志目录，供用户手动转交。
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from loguru import logger

from ....application.dto import ErrorReportDTO
from ....domain.entities import ErrorRecord
from ....shared.constants import REPORT_FILE_PREFIX
from ....shared.exceptions import DeliveryError


class FileReportDelivery:
    """文件错误报告投递（实现 ReportDeliveryPort）"""

    def __init__(self, output_dir: str | Path):
        self._dir = Path(output_dir)
        self.last_report_path: Path | None = None

    @property
    def name(self) -> str:
        return "file"

    async def deliver(self, contact: str, records: Sequence[ErrorRecord]) -> None:
        report = ErrorReportDTO.build(contact, records)
        stamp = report.generated_at.strftime("%Y%m%d_%H%M%S_%f")
        path = self._dir / f"{REPORT_FILE_PREFIX}{stamp}.txt"

        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            path.write_text(report.to_text(), encoding="utf-8")
        except OSError as e:
            raise DeliveryError(f"错误报告保存失败: {e}", cause=e) from e

        self.last_report_path = path
        logger.info(f"错误报告已保存到: {path}")
