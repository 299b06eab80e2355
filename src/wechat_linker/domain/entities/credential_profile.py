"""小程序凭据实体

CredentialProfile 表示一个小程序的命名凭据（AppID + AppSecret），
CredentialSnapshot 是凭据仓库在某一时刻的不可变快照。
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any
from uuid import uuid4

from ...shared.exceptions import NotFoundError, ValidationError
from ...shared.utils import from_epoch_millis, to_epoch_millis, utc_now


def _require(value: str, field_name: str) -> str:
    """去除首尾空白并校验非空"""
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field_name}不能为空", details={"field": field_name})
    return cleaned


@dataclass(frozen=True)
class CredentialProfile:
    """
    小程序凭据

    Attributes:
        id: 唯一标识，创建时生成，不可变
        name: 显示名称
        app_id: 小程序 AppID
        app_secret: 小程序 AppSecret（不参与 repr，不写入日志）
        created_at: 创建时间，不可变
    """

    id: str
    name: str
    app_id: str
    app_secret: str = field(repr=False)
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(cls, name: str, app_id: str, app_secret: str) -> CredentialProfile:
        """创建新凭据（校验并去除首尾空白）

        Raises:
            ValidationError: 任一字段为空
        """
        return cls(
            id=str(uuid4()),
            name=_require(name, "名称"),
            app_id=_require(app_id, "AppID"),
            app_secret=_require(app_secret, "AppSecret"),
        )

    def with_fields(self, name: str, app_id: str, app_secret: str) -> CredentialProfile:
        """替换可变字段，保留 id 与 created_at"""
        return replace(
            self,
            name=_require(name, "名称"),
            app_id=_require(app_id, "AppID"),
            app_secret=_require(app_secret, "AppSecret"),
        )

    def to_dict(self) -> dict[str, Any]:
        """转换为持久化格式"""
        return {
            "id": self.id,
            "name": self.name,
            "appid": self.app_id,
            "secret": self.app_secret,
            "created_at": to_epoch_millis(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CredentialProfile:
        """从持久化格式创建实例"""
        created_at = data.get("created_at")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            app_id=str(data.get("appid", "")),
            app_secret=str(data.get("secret", "")),
            created_at=from_epoch_millis(created_at) if created_at else utc_now(),
        )


@dataclass(frozen=True)
class CredentialSnapshot:
    """
    凭据仓库快照

    所有修改操作都返回新的快照，原快照保持不变。

    不变式：
    - profiles 中 id 唯一，保持插入顺序
    - default_profile_id 若存在，必须指向 profiles 中的某个凭据
    """

    profiles: tuple[CredentialProfile, ...] = ()
    default_profile_id: str | None = None

    def __post_init__(self) -> None:
        ids = [p.id for p in self.profiles]
        if len(ids) != len(set(ids)):
            raise ValueError("凭据 id 重复")
        if self.default_profile_id is not None and self.default_profile_id not in ids:
            raise ValueError(f"默认凭据不存在: {self.default_profile_id}")

    def find(self, profile_id: str | None) -> CredentialProfile | None:
        if not profile_id:
            return None
        for profile in self.profiles:
            if profile.id == profile_id:
                return profile
        return None

    def _index_of(self, profile_id: str) -> int:
        for index, profile in enumerate(self.profiles):
            if profile.id == profile_id:
                return index
        raise NotFoundError(f"凭据不存在: {profile_id}", details={"id": profile_id})

    def with_added(self, profile: CredentialProfile) -> CredentialSnapshot:
        """追加凭据；尚无默认凭据时，新凭据成为默认"""
        return CredentialSnapshot(
            profiles=(*self.profiles, profile),
            default_profile_id=self.default_profile_id or profile.id,
        )

    def with_updated(
        self,
        profile_id: str,
        name: str,
        app_id: str,
        app_secret: str,
    ) -> CredentialSnapshot:
        """原位替换可变字段

        Raises:
            NotFoundError: id 不存在（先于字段校验）
            ValidationError: 字段为空
        """
        index = self._index_of(profile_id)
        updated = self.profiles[index].with_fields(name, app_id, app_secret)
        profiles = list(self.profiles)
        profiles[index] = updated
        return CredentialSnapshot(tuple(profiles), self.default_profile_id)

    def without(self, profile_id: str) -> CredentialSnapshot:
        """删除凭据；仅当被删除的是默认凭据时清空默认"""
        index = self._index_of(profile_id)
        profiles = self.profiles[:index] + self.profiles[index + 1 :]
        default_id = None if self.default_profile_id == profile_id else self.default_profile_id
        return CredentialSnapshot(profiles, default_id)

    def with_default(self, profile_id: str | None) -> CredentialSnapshot:
        """设置或清除默认凭据"""
        if profile_id is not None:
            self._index_of(profile_id)
        return CredentialSnapshot(self.profiles, profile_id)

    def to_dict(self) -> dict[str, Any]:
        """转换为持久化格式"""
        return {
            "mini_apps": [p.to_dict() for p in self.profiles],
            "default_app_id": self.default_profile_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CredentialSnapshot:
        """从持久化格式创建快照

        悬空的默认凭据 id 会被丢弃，而不是让加载失败。
        """
        profiles = tuple(CredentialProfile.from_dict(item) for item in data.get("mini_apps") or [])
        default_id = data.get("default_app_id")
        if default_id not in {p.id for p in profiles}:
            default_id = None
        return cls(profiles=profiles, default_profile_id=default_id)
