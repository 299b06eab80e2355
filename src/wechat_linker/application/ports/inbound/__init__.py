"""入站端口 - 定义应用层对外提供的服务接口"""

from .link_service import LinkBatchProgress, LinkServicePort, ProgressCallback

__all__ = [
    "LinkBatchProgress",
    "LinkServicePort",
    "ProgressCallback",
]
