"""批量生成 URL Link 用例"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable

from loguru import logger

from ...domain.entities import (
    CredentialProfile,
    LinkBatchResult,
    LinkRequestBatch,
    LinkRequestItem,
    LinkResult,
)
from ...domain.entities.link_request import ItemLike
from ...domain.value_objects import EnvVersion, ErrorOrigin, ErrorSeverity
from ...shared.exceptions import LinkerError, LinkExchangeError, NoProfileSelectedError
from ...shared.utils.logger import clear_request_id, log_link_generated, set_request_id
from ..ports.inbound import LinkBatchProgress, ProgressCallback
from ..ports.outbound import LinkExchangePort
from ..services import ErrorAggregator
from .credential_store import CredentialStore


class LinkGenerator:
    """
    URL Link 批量生成器

    负责解析凭据与小程序版本，对每个有效条目发起一次兑换调用，
    并把成功与失败整理成与输入顺序一致的结果列表。

    单条失败不会中断批量；整个调用只会因两个前置条件失败：
    - 凭据为空或不存在 (NoProfileSelectedError)
    - 过滤后没有有效路径 (NoValidItemsError)

    本层不做重试，每条只尝试一次。
    """

    def __init__(
        self,
        store: CredentialStore,
        exchange: LinkExchangePort,
        errors: ErrorAggregator | None = None,
        max_concurrency: int = 1,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency 必须 >= 1")
        self._store = store
        self._exchange = exchange
        self._errors = errors
        self._max_concurrency = max_concurrency

    async def generate(
        self,
        profile_id: str | None,
        env_version: EnvVersion | str,
        items: Iterable[ItemLike],
        on_progress: ProgressCallback | None = None,
    ) -> LinkBatchResult:
        """
        批量生成 URL Link

        Args:
            profile_id: 凭据 id（不会自动回退到默认凭据）
            env_version: 小程序版本 release / develop / trial
            items: 候选请求条目
            on_progress: 进度回调函数

        Returns:
            与有效条目一一对应的有序结果

        Raises:
            NoProfileSelectedError: 凭据为空或不存在
            NoValidItemsError: 没有有效路径
            ValidationError: 小程序版本无效
        """
        profile = self._store.resolve(profile_id)
        if profile is None:
            raise NoProfileSelectedError(details={"profile_id": profile_id})

        env = EnvVersion.parse(env_version)
        batch = LinkRequestBatch.from_items(items)
        progress = LinkBatchProgress(total=len(batch))

        request_id = set_request_id()
        logger.info(
            f"开始生成 URL Link [{request_id}]: {profile.name}, 版本={env.value}, 共 {len(batch)} 条"
        )

        try:
            if self._max_concurrency == 1:
                results = [
                    await self._generate_one(profile, env, item, progress, on_progress)
                    for item in batch
                ]
            else:
                semaphore = asyncio.Semaphore(self._max_concurrency)

                async def bounded(item: LinkRequestItem) -> LinkResult:
                    async with semaphore:
                        return await self._generate_one(profile, env, item, progress, on_progress)

                # gather 按参数顺序返回结果
                results = list(await asyncio.gather(*(bounded(item) for item in batch)))
        finally:
            clear_request_id()

        logger.info(
            f"URL Link 生成完成: 成功 {progress.success}/{progress.total}, 失败 {progress.failed}"
        )
        return LinkBatchResult(tuple(results))

    async def generate_with_default(
        self,
        env_version: EnvVersion | str,
        items: Iterable[ItemLike],
        on_progress: ProgressCallback | None = None,
    ) -> LinkBatchResult:
        """使用默认凭据生成"""
        return await self.generate(self._store.default_profile_id, env_version, items, on_progress)

    async def _generate_one(
        self,
        profile: CredentialProfile,
        env: EnvVersion,
        item: LinkRequestItem,
        progress: LinkBatchProgress,
        on_progress: ProgressCallback | None,
    ) -> LinkResult:
        started = time.perf_counter()
        try:
            link = await self._exchange.exchange(
                profile.app_id,
                profile.app_secret,
                env,
                item.path,
                item.query,
            )
            if not link:
                raise LinkExchangeError("接口未返回 URL Link")
            result = LinkResult.success(item, link)
            progress.mark_success(item.path)
        except Exception as e:
            message = e.user_message if isinstance(e, LinkerError) else (str(e) or type(e).__name__)
            result = LinkResult.failure(item, message)
            progress.mark_failed(item.path, result.error_message)
            self._record_failure(item, e, result.error_message)

        duration_ms = int((time.perf_counter() - started) * 1000)
        log_link_generated(
            profile.app_id,
            item.path,
            env.value,
            duration_ms,
            success=result.ok,
            error=result.error_message or None,
        )

        if on_progress:
            on_progress(progress)
        return result

    def _record_failure(self, item: LinkRequestItem, exc: Exception, message: str) -> None:
        if self._errors is None:
            return
        remote = isinstance(exc, LinkExchangeError) and exc.remote
        self._errors.capture(
            f"生成 URL Link 失败 ({item.path}): {message}",
            origin=ErrorOrigin.REMOTE if remote else ErrorOrigin.LOCAL,
            severity=ErrorSeverity.WARNING,
        )
