"""错误报告数据传输对象"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from platform import system as platform_system
from typing import Any

from ...domain.entities import ErrorRecord
from ...domain.value_objects import ErrorOrigin
from ...shared.constants import APP_NAME, VERSION
from ...shared.utils import utc_now


@dataclass
class ErrorReportDTO:
    """错误报告DTO - 投递适配器共用的报告内容"""

    contact: str
    records: list[ErrorRecord]
    app: str = APP_NAME
    version: str = VERSION
    platform: str = field(default_factory=platform_system)
    generated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def build(cls, contact: str, records: Sequence[ErrorRecord]) -> ErrorReportDTO:
        return cls(contact=contact, records=list(records))

    def to_payload(self) -> dict[str, Any]:
        """JSON 投递格式"""
        return {
            "contact": self.contact,
            "app": self.app,
            "version": self.version,
            "platform": self.platform,
            "generated_at": self.generated_at.isoformat(),
            "records": [r.to_dict() for r in self.records],
        }

    def to_text(self) -> str:
        """纯文本报告（本地与远端错误分节列出）"""
        lines = [
            f"=== {self.app} 错误报告 ===",
            "",
            f"报告时间: {self.generated_at.isoformat()}",
            f"系统: {self.platform}",
            f"版本: {self.version}",
            f"联系方式: {self.contact}",
            "",
        ]

        sections = (
            (ErrorOrigin.LOCAL, "--- 本地错误 ---"),
            (ErrorOrigin.REMOTE, "--- 远端错误 ---"),
        )
        for origin, title in sections:
            group = [r for r in self.records if r.origin == origin]
            if not group:
                continue
            lines.append(title)
            for i, record in enumerate(group, 1):
                lines.append(
                    f"{i} [{record.timestamp.isoformat()}] [{record.severity.value}] {record.message}"
                )
                if record.stack:
                    lines.append(f"Stack: {record.stack}")
            lines.append("")

        if not self.records:
            lines.append("没有记录的错误。")

        return "\n".join(lines) + "\n"
