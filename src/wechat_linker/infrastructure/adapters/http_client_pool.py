"""HTTP 连接池管理器

按域名复用 httpx.AsyncClient，微信接口与错误报告接收端各用一个客户端。
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import httpx
from loguru import logger

from ...shared.constants import DEFAULT_TIMEOUT, VERSION


def _default_headers() -> dict[str, str]:
    return {"User-Agent": f"wechat-linker/{VERSION}", "Accept": "application/json"}


@dataclass
class ClientConfig:
    """客户端配置"""

    timeout: float = DEFAULT_TIMEOUT
    timeout_connect: float = 5.0
    max_connections: int = 20
    max_keepalive_connections: int = 10
    follow_redirects: bool = False
    proxy: str | None = None
    headers: dict[str, str] = field(default_factory=_default_headers)

    def to_httpx_timeout(self) -> httpx.Timeout:
        """转换为 httpx.Timeout（连接超时单独设置）"""
        return httpx.Timeout(self.timeout, connect=self.timeout_connect)

    def to_httpx_limits(self) -> httpx.Limits:
        """转换为 httpx.Limits"""
        return httpx.Limits(
            max_connections=self.max_connections,
            max_keepalive_connections=self.max_keepalive_connections,
        )


class HttpClientPool:
    """
    HTTP 连接池管理器（单例）

    管理多个 httpx.AsyncClient 实例，支持按域名配置。
    """

    _instance: HttpClientPool | None = None
    _lock: asyncio.Lock | None = None

    def __new__(cls) -> HttpClientPool:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if getattr(self, "_initialized", False):
            return

        self._clients: dict[str, httpx.AsyncClient] = {}
        self._configs: dict[str, ClientConfig] = {}
        self._initialized = True

    @classmethod
    def _get_lock(cls) -> asyncio.Lock:
        if cls._lock is None:
            cls._lock = asyncio.Lock()
        return cls._lock

    def configure(self, domain: str, config: ClientConfig) -> None:
        """
        为特定域名配置客户端参数（已创建的客户端不受影响）

        Args:
            domain: 域名（如 'api.weixin.qq.com'）
            config: 客户端配置
        """
        self._configs[domain] = config
        logger.debug(f"已配置域名 {domain} 的客户端参数")

    async def get_client(self, domain: str) -> httpx.AsyncClient:
        """获取指定域名的客户端，不存在时按配置创建"""
        async with self._get_lock():
            client = self._clients.get(domain)
            if client is None or client.is_closed:
                client = self._create_client(self._configs.get(domain, ClientConfig()))
                self._clients[domain] = client
                logger.debug(f"创建新的 HTTP 客户端: {domain}")
            return client

    @staticmethod
    def _create_client(config: ClientConfig) -> httpx.AsyncClient:
        kwargs: dict[str, Any] = {
            "timeout": config.to_httpx_timeout(),
            "limits": config.to_httpx_limits(),
            "follow_redirects": config.follow_redirects,
            "headers": config.headers,
        }
        if config.proxy:
            kwargs["proxy"] = config.proxy
        return httpx.AsyncClient(**kwargs)

    async def close_all(self) -> None:
        """关闭所有客户端"""
        async with self._get_lock():
            for domain, client in list(self._clients.items()):
                try:
                    await client.aclose()
                except Exception as e:
                    logger.warning(f"关闭客户端 {domain} 失败: {e}")
            self._clients.clear()
            logger.debug("所有 HTTP 客户端已关闭")

    @property
    def active_clients(self) -> int:
        """活跃客户端数量"""
        return len(self._clients)

    @classmethod
    def reset(cls) -> None:
        """重置单例（用于测试，不关闭连接）"""
        if cls._instance is not None:
            cls._instance._clients.clear()
            cls._instance._configs.clear()
        cls._instance = None
        cls._lock = None


def get_http_pool() -> HttpClientPool:
    """获取全局连接池实例"""
    return HttpClientPool()
