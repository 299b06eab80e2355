"""凭据仓库用例"""

from __future__ import annotations

from loguru import logger

from ...domain.entities import CredentialProfile, CredentialSnapshot
from ...shared.exceptions import PersistenceError
from ...shared.utils import mask_app_id
from ..ports.outbound import SettingsStoragePort


class CredentialStore:
    """
    凭据仓库

    持有命名凭据列表与可选的默认凭据。每次修改都会先生成新的不可变快照，
    经持久化成功后才替换内存中的快照；持久化失败时内存状态保持不变，
    调用方收到 PersistenceError。

    多个编辑者同时读改写不做互斥，假定同一时刻只有一个编辑者。
    """

    def __init__(
        self,
        storage: SettingsStoragePort,
        snapshot: CredentialSnapshot | None = None,
    ):
        self._storage = storage
        self._snapshot = snapshot if snapshot is not None else self._load()

    # ---------------- 只读访问 ----------------

    @property
    def snapshot(self) -> CredentialSnapshot:
        """当前已提交的快照"""
        return self._snapshot

    @property
    def profiles(self) -> tuple[CredentialProfile, ...]:
        return self._snapshot.profiles

    @property
    def default_profile_id(self) -> str | None:
        return self._snapshot.default_profile_id

    @property
    def default_profile(self) -> CredentialProfile | None:
        return self._snapshot.find(self._snapshot.default_profile_id)

    def resolve(self, profile_id: str | None) -> CredentialProfile | None:
        """按 id 查找凭据，无副作用"""
        return self._snapshot.find(profile_id)

    def reload(self) -> CredentialSnapshot:
        """重新从存储读取快照"""
        self._snapshot = self._load()
        return self._snapshot

    # ---------------- 修改操作 ----------------

    def add(self, name: str, app_id: str, app_secret: str) -> CredentialProfile:
        """
        添加凭据

        尚未设置默认凭据时，新凭据自动成为默认。

        Raises:
            ValidationError: 任一字段为空
            PersistenceError: 持久化失败
        """
        profile = CredentialProfile.create(name, app_id, app_secret)
        self._commit(self._snapshot.with_added(profile))
        logger.info(f"已添加小程序配置: {profile.name} ({mask_app_id(profile.app_id)})")
        return profile

    def update(self, profile_id: str, name: str, app_id: str, app_secret: str) -> None:
        """
        更新凭据的名称、AppID 与 AppSecret，保留 id、创建时间与位置

        Raises:
            NotFoundError: id 不存在
            ValidationError: 字段为空
            PersistenceError: 持久化失败
        """
        self._commit(self._snapshot.with_updated(profile_id, name, app_id, app_secret))
        logger.info(f"已更新小程序配置: {profile_id}")

    def remove(self, profile_id: str) -> None:
        """
        删除凭据；若为默认凭据则同时清空默认

        Raises:
            NotFoundError: id 不存在
            PersistenceError: 持久化失败
        """
        self._commit(self._snapshot.without(profile_id))
        logger.info(f"已删除小程序配置: {profile_id}")

    def set_default(self, profile_id: str | None) -> None:
        """
        设置或清除默认凭据（幂等）

        Raises:
            NotFoundError: 给定的 id 不存在
            PersistenceError: 持久化失败
        """
        self._commit(self._snapshot.with_default(profile_id))
        logger.info(f"默认小程序配置: {profile_id or '无'}")

    # ---------------- internal ----------------

    def _load(self) -> CredentialSnapshot:
        try:
            return self._storage.load()
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"读取设置失败: {e}", cause=e) from e

    def _commit(self, snapshot: CredentialSnapshot) -> None:
        try:
            self._storage.save(snapshot)
        except PersistenceError as e:
            logger.error(f"保存设置失败: {e}")
            raise
        except Exception as e:
            logger.error(f"保存设置失败: {e}")
            raise PersistenceError(f"保存设置失败: {e}", cause=e) from e
        self._snapshot = snapshot
