"""微信小程序 URL Link 接口适配器

调用微信开放接口：
1. POST /cgi-bin/stable_token 获取 access_token（带缓存）
2. POST /wxa/generate_urllink 生成 URL Link

实现 LinkExchangePort。
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
from loguru import logger

from ....domain.value_objects import EnvVersion
from ....shared.constants import (
    DEFAULT_TOKEN_EXPIRES_IN,
    GENERATE_URLLINK_PATH,
    STABLE_TOKEN_PATH,
    TOKEN_INVALID_ERRCODES,
    WECHAT_API_BASE_URL,
    WECHAT_API_DOMAIN,
)
from ....shared.exceptions import AccessTokenError, LinkExchangeError
from ....shared.utils import mask_app_id
from ..http_client_pool import get_http_pool
from .token_cache import AccessTokenCache


class WechatUrlLinkClient:
    """
    微信 URL Link 客户端

    使用方法:
        client = WechatUrlLinkClient(token_cache=AccessTokenCache(path))
        link = await client.exchange(appid, secret, EnvVersion.RELEASE, "pages/index", "id=1")

    每次调用只尝试一次；access_token 失效的错误码会作废缓存，但不会在本次调用内重试。
    """

    def __init__(
        self,
        base_url: str = WECHAT_API_BASE_URL,
        token_cache: AccessTokenCache | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            base_url: 接口基础URL
            token_cache: access_token 缓存（默认仅内存）
            client: 外部提供的 HTTP 客户端（默认从连接池获取）
        """
        self._base_url = base_url.rstrip("/")
        self._tokens = token_cache or AccessTokenCache()
        self._client = client
        self._token_locks: dict[str, asyncio.Lock] = {}

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            return await get_http_pool().get_client(WECHAT_API_DOMAIN)
        return self._client

    async def exchange(
        self,
        app_id: str,
        app_secret: str,
        env_version: EnvVersion,
        path: str,
        query: str,
    ) -> str:
        """生成一条 URL Link

        Raises:
            AccessTokenError: access_token 获取失败
            LinkExchangeError: 传输失败、响应异常或接口返回错误
        """
        token = await self.get_access_token(app_id, app_secret)

        body = {
            "path": path,
            "query": query,
            "env_version": EnvVersion(env_version).value,
        }
        logger.debug(f"生成 URL Link: path={path}, query={query}")
        data = await self._post_json(
            GENERATE_URLLINK_PATH,
            body,
            params={"access_token": token},
            error_class=LinkExchangeError,
        )

        errcode = _errcode(data)
        if errcode:
            if errcode in TOKEN_INVALID_ERRCODES:
                self._tokens.invalidate(app_id)
            raise LinkExchangeError(
                f"{data.get('errmsg') or '未知错误'} (errcode={errcode})",
                errcode=errcode,
                remote=True,
                details={"path": path},
            )

        link = data.get("url_link")
        if not isinstance(link, str) or not link:
            raise LinkExchangeError("解析响应失败: 缺少 url_link", details={"path": path})
        return link

    async def get_access_token(self, app_id: str, app_secret: str) -> str:
        """获取 access_token（缓存有效时直接返回）

        Raises:
            AccessTokenError: 获取失败
        """
        cached = self._tokens.get(app_id)
        if cached:
            return cached

        lock = self._token_locks.setdefault(app_id, asyncio.Lock())
        async with lock:
            # 等待锁期间可能已被其他调用刷新
            cached = self._tokens.get(app_id)
            if cached:
                return cached

            logger.info(f"请求 access_token: {mask_app_id(app_id)}")
            data = await self._post_json(
                STABLE_TOKEN_PATH,
                {
                    "grant_type": "client_credential",
                    "appid": app_id,
                    "secret": app_secret,
                },
                error_class=AccessTokenError,
            )

            token = data.get("access_token")
            if not isinstance(token, str) or not token:
                errcode = _errcode(data)
                raise AccessTokenError(
                    f"获取 token 失败: {data.get('errmsg') or '未知错误'}"
                    + (f" (errcode={errcode})" if errcode else ""),
                    errcode=errcode,
                    remote=bool(errcode),
                )

            expires_in = data.get("expires_in")
            if not isinstance(expires_in, int) or expires_in <= 0:
                expires_in = DEFAULT_TOKEN_EXPIRES_IN
            self._tokens.put(app_id, token, expires_in)
            return token

    async def _post_json(
        self,
        path: str,
        body: dict[str, Any],
        *,
        error_class: type[LinkExchangeError],
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """发送 JSON 请求并解析 JSON 响应，所有故障统一映射为 error_class"""
        client = await self._get_client()
        url = f"{self._base_url}{path}"

        try:
            response = await client.post(url, json=body, params=params)
        except httpx.TimeoutException as e:
            raise error_class(f"请求超时: {type(e).__name__}", cause=e) from e
        except httpx.HTTPError as e:
            raise error_class(f"请求失败: {e}", cause=e) from e

        if response.status_code != 200:
            raise error_class(
                f"请求失败: HTTP {response.status_code}",
                details={"status_code": response.status_code},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise error_class(f"解析响应失败: {e}", cause=e) from e

        if not isinstance(data, dict):
            raise error_class("解析响应失败: 响应不是 JSON 对象")
        return data


def _errcode(data: dict[str, Any]) -> int:
    try:
        return int(data.get("errcode") or 0)
    except (TypeError, ValueError):
        return -1
