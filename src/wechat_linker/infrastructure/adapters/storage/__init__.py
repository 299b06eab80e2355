"""本地存储适配器"""

from .local_json import LocalJsonErrorJournal, LocalJsonSettingsStorage

__all__ = [
    "LocalJsonErrorJournal",
    "LocalJsonSettingsStorage",
]
