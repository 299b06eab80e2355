"""本地 JSON 存储

- LocalJsonSettingsStorage: 小程序配置 settings.json（实现 SettingsStoragePort）
- LocalJsonErrorJournal: 错误日志 errors.json（实现 ErrorJournalPort）

写入均为原子写入：先写临时文件，再用 os.replace 覆盖。
"""

from __future__ import annotations

import json
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from loguru import logger

from ....domain.entities import CredentialSnapshot, ErrorRecord
from ....shared.exceptions import StorageReadError, StorageWriteError


def _atomic_write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")
    tmp_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    os.replace(tmp_path, path)


class LocalJsonSettingsStorage:
    """小程序配置存储"""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> CredentialSnapshot:
        if not self._path.exists():
            return CredentialSnapshot()

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except OSError as e:
            raise StorageReadError(f"读取设置失败: {e}", cause=e) from e
        except ValueError as e:
            raise StorageReadError(f"解析设置失败: {e}", cause=e) from e

        if not isinstance(data, dict):
            raise StorageReadError("解析设置失败: 格式错误")

        try:
            return CredentialSnapshot.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise StorageReadError(f"解析设置失败: {e}", cause=e) from e

    def save(self, snapshot: CredentialSnapshot) -> None:
        # 保留其他模块写入的键（如主题、语言）
        data: dict[str, Any] = {}
        if self._path.exists():
            try:
                existing = json.loads(self._path.read_text(encoding="utf-8"))
                if isinstance(existing, dict):
                    data = existing
            except (OSError, ValueError):
                logger.warning(f"设置文件损坏，将被覆盖: {self._path}")

        data.update(snapshot.to_dict())
        try:
            _atomic_write_json(self._path, data)
        except OSError as e:
            raise StorageWriteError(f"保存设置失败: {e}", cause=e) from e
        logger.debug(f"设置已保存到 {self._path}")


class LocalJsonErrorJournal:
    """错误日志存储"""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[ErrorRecord]:
        if not self._path.exists():
            return []

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageReadError(f"读取错误日志失败: {e}", cause=e) from e

        records: list[ErrorRecord] = []
        for item in data if isinstance(data, list) else []:
            try:
                records.append(ErrorRecord.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError):
                continue
        return records

    def save(self, records: Sequence[ErrorRecord]) -> None:
        try:
            _atomic_write_json(self._path, [r.to_dict() for r in records])
        except OSError as e:
            raise StorageWriteError(f"写入错误日志失败: {e}", cause=e) from e
