"""access_token 缓存

按 AppID 缓存微信接口的 access_token，内存优先，可选持久化到磁盘。
剩余有效期低于 refresh_margin 秒时视为过期。
"""

from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from ....shared.constants import TOKEN_REFRESH_MARGIN
from ....shared.utils import mask_app_id


@dataclass(frozen=True)
class CachedToken:
    """缓存的 access_token"""

    app_id: str
    token: str
    expires_at: float  # epoch 秒

    def is_fresh(self, now: float, margin: int) -> bool:
        return self.expires_at > now + margin

    def to_dict(self) -> dict[str, Any]:
        return {"token": self.token, "expires_at": self.expires_at}


class AccessTokenCache:
    """
    access_token 缓存

    磁盘读写失败只记录日志，不影响调用方。
    """

    def __init__(
        self,
        cache_file: str | Path | None = None,
        refresh_margin: int = TOKEN_REFRESH_MARGIN,
        clock=time.time,
    ) -> None:
        self._file = Path(cache_file) if cache_file else None
        self._margin = refresh_margin
        self._clock = clock
        self._memory: dict[str, CachedToken] = {}

    def get(self, app_id: str) -> str | None:
        """获取仍然有效的 token，没有则返回 None"""
        now = self._clock()

        cached = self._memory.get(app_id)
        if cached and cached.is_fresh(now, self._margin):
            return cached.token

        cached = self._load_from_disk().get(app_id)
        if cached and cached.is_fresh(now, self._margin):
            self._memory[app_id] = cached
            logger.debug(f"使用磁盘缓存的 access_token: {mask_app_id(app_id)}")
            return cached.token

        return None

    def put(self, app_id: str, token: str, expires_in: int) -> None:
        """写入 token"""
        cached = CachedToken(app_id=app_id, token=token, expires_at=self._clock() + expires_in)
        self._memory[app_id] = cached

        if self._file is None:
            return
        entries = self._load_from_disk()
        entries[app_id] = cached
        self._write_to_disk(entries)

    def invalidate(self, app_id: str) -> None:
        """作废指定 AppID 的 token"""
        self._memory.pop(app_id, None)

        if self._file is None:
            return
        entries = self._load_from_disk()
        if entries.pop(app_id, None) is not None:
            self._write_to_disk(entries)
        logger.debug(f"已作废 access_token: {mask_app_id(app_id)}")

    # ---------------- internal ----------------

    def _load_from_disk(self) -> dict[str, CachedToken]:
        if self._file is None or not self._file.exists():
            return {}
        try:
            data = json.loads(self._file.read_text(encoding="utf-8"))
            return {
                app_id: CachedToken(app_id, str(item["token"]), float(item["expires_at"]))
                for app_id, item in data.items()
            }
        except Exception as e:
            logger.debug(f"读取 token 缓存失败，已忽略: {e}")
            return {}

    def _write_to_disk(self, entries: dict[str, CachedToken]) -> None:
        assert self._file is not None
        try:
            self._file.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._file.with_suffix(".tmp")
            tmp_path.write_text(
                json.dumps({k: v.to_dict() for k, v in entries.items()}, indent=2),
                encoding="utf-8",
            )
            os.replace(tmp_path, self._file)
        except Exception as e:
            logger.warning(f"保存 token 缓存失败: {e}")
