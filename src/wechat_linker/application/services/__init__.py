"""应用服务"""

from .error_aggregator import ErrorAggregator, summarize_records

__all__ = [
    "ErrorAggregator",
    "summarize_records",
]
