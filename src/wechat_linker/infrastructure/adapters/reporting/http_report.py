"""HTTP 错误报告投递

把错误报告以 JSON 形式 POST 到配置的接收地址，2xx 视为成功。
"""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import urlparse

import httpx
from loguru import logger

from ....application.dto import ErrorReportDTO
from ....domain.entities import ErrorRecord
from ....shared.exceptions import ConfigError, DeliveryError
from ..http_client_pool import get_http_pool


class HttpReportDelivery:
    """HTTP 错误报告投递（实现 ReportDeliveryPort）"""

    def __init__(self, endpoint: str, client: httpx.AsyncClient | None = None):
        parsed = urlparse(endpoint or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigError(f"无效的错误报告地址: {endpoint!r}")
        self._endpoint = endpoint
        self._domain = parsed.netloc
        self._client = client

    @property
    def name(self) -> str:
        return f"http:{self._domain}"

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            return await get_http_pool().get_client(self._domain)
        return self._client

    async def deliver(self, contact: str, records: Sequence[ErrorRecord]) -> None:
        report = ErrorReportDTO.build(contact, records)
        client = await self._get_client()

        try:
            response = await client.post(self._endpoint, json=report.to_payload())
        except httpx.TimeoutException as e:
            raise DeliveryError(f"错误报告发送超时: {type(e).__name__}", cause=e) from e
        except httpx.HTTPError as e:
            raise DeliveryError(f"错误报告发送失败: {e}", cause=e) from e

        if not response.is_success:
            raise DeliveryError(
                f"错误报告发送失败: HTTP {response.status_code}",
                details={"status_code": response.status_code},
            )

        logger.info(f"错误报告已发送到 {self._domain}，共 {len(records)} 条")
