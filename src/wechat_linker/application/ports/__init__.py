"""
应用层端口

Hexagonal Architecture中的端口定义：
- inbound: 入站端口，定义应用层对外提供的服务接口
- outbound: 出站端口，定义应用层依赖的外部服务接口
"""

from .inbound import LinkBatchProgress, LinkServicePort, ProgressCallback
from .outbound import (
    ErrorJournalPort,
    LinkExchangePort,
    ReportDeliveryPort,
    SettingsStoragePort,
)

__all__ = [
    # Inbound
    "LinkServicePort",
    "LinkBatchProgress",
    "ProgressCallback",
    # Outbound
    "LinkExchangePort",
    "ReportDeliveryPort",
    "SettingsStoragePort",
    "ErrorJournalPort",
]
