"""错误报告投递适配器"""

from .file_report import FileReportDelivery
from .http_report import HttpReportDelivery

__all__ = [
    "FileReportDelivery",
    "HttpReportDelivery",
]
