"""设置持久化出站端口"""

from typing import Protocol, runtime_checkable

from ....domain.entities import CredentialSnapshot


@runtime_checkable
class SettingsStoragePort(Protocol):
    """
    设置存储端口

    不透明的键值存储，只暴露读取与写入两个操作。
    """

    def load(self) -> CredentialSnapshot:
        """
        读取已保存的凭据快照

        Returns:
            凭据快照，从未保存过时返回空快照

        Raises:
            StorageReadError: 读取或解析失败
        """
        ...

    def save(self, snapshot: CredentialSnapshot) -> None:
        """
        保存凭据快照

        Raises:
            StorageWriteError: 写入失败
        """
        ...
