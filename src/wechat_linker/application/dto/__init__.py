"""数据传输对象"""

from .report_dto import ErrorReportDTO

__all__ = [
    "ErrorReportDTO",
]
