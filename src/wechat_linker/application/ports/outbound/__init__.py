"""出站端口 - 定义应用层依赖的外部服务接口"""

from .error_journal_port import ErrorJournalPort
from .link_exchange_port import LinkExchangePort
from .report_delivery_port import ReportDeliveryPort
from .settings_storage_port import SettingsStoragePort

__all__ = [
    "ErrorJournalPort",
    "LinkExchangePort",
    "ReportDeliveryPort",
    "SettingsStoragePort",
]
