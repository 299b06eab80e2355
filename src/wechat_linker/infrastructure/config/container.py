"""依赖注入容器 - 组装应用组件"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

from loguru import logger

from ...application.ports.inbound import LinkServicePort
from ...application.ports.outbound import (
    ErrorJournalPort,
    LinkExchangePort,
    ReportDeliveryPort,
    SettingsStoragePort,
)
from ...application.services import ErrorAggregator
from ...application.use_cases import CredentialStore, LinkGenerator, ReportErrorsUseCase
from ...shared.constants import WECHAT_API_DOMAIN
from ..adapters.http_client_pool import ClientConfig, get_http_pool
from .paths import get_error_log_file, get_log_dir, get_settings_file, get_token_cache_file
from .settings import AppSettings, get_settings


@dataclass
class Container:
    """
    依赖注入容器

    负责创建和管理应用程序的所有依赖项。
    错误汇总器在容器内只创建一次，并以引用方式注入到需要捕获错误的组件。
    """

    settings: AppSettings = field(default_factory=get_settings)

    # 线程安全锁（保护懒加载属性的初始化）
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    # 适配器缓存
    _settings_storage: SettingsStoragePort | None = field(default=None, init=False)
    _link_exchange: LinkExchangePort | None = field(default=None, init=False)
    _report_delivery: ReportDeliveryPort | None = field(default=None, init=False)
    _error_journal: ErrorJournalPort | None = field(default=None, init=False)

    # 服务与用例缓存
    _errors: ErrorAggregator | None = field(default=None, init=False)
    _credential_store: CredentialStore | None = field(default=None, init=False)
    _link_generator: LinkGenerator | None = field(default=None, init=False)
    _report_use_case: ReportErrorsUseCase | None = field(default=None, init=False)

    # ---------------- 适配器 ----------------

    @property
    def settings_storage(self) -> SettingsStoragePort:
        """获取小程序配置存储"""
        if self._settings_storage is None:
            with self._lock:
                if self._settings_storage is None:
                    from ..adapters.storage import LocalJsonSettingsStorage

                    path = (
                        Path(self.settings.storage.settings_file)
                        if self.settings.storage.settings_file
                        else get_settings_file()
                    )
                    self._settings_storage = LocalJsonSettingsStorage(path)
        return self._settings_storage

    @property
    def link_exchange(self) -> LinkExchangePort:
        """获取 URL Link 兑换适配器"""
        if self._link_exchange is None:
            with self._lock:
                if self._link_exchange is None:
                    self._link_exchange = self._create_link_exchange()
        return self._link_exchange

    @property
    def report_delivery(self) -> ReportDeliveryPort:
        """获取错误报告投递适配器"""
        if self._report_delivery is None:
            with self._lock:
                if self._report_delivery is None:
                    self._report_delivery = self._create_report_delivery()
        return self._report_delivery

    @property
    def error_journal(self) -> ErrorJournalPort | None:
        """获取错误日志存储（未启用持久化时为 None）"""
        if self._error_journal is None and self.settings.error_log.persist:
            with self._lock:
                if self._error_journal is None:
                    from ..adapters.storage import LocalJsonErrorJournal

                    self._error_journal = LocalJsonErrorJournal(get_error_log_file())
        return self._error_journal

    # ---------------- 服务与用例 ----------------

    @property
    def errors(self) -> ErrorAggregator:
        """获取错误汇总器（进程内唯一）"""
        if self._errors is None:
            with self._lock:
                if self._errors is None:
                    self._errors = ErrorAggregator(
                        delivery=self.report_delivery,
                        journal=self.error_journal,
                        max_records=self.settings.error_log.max_records,
                    )
        return self._errors

    @property
    def credential_store(self) -> CredentialStore:
        """获取凭据仓库"""
        if self._credential_store is None:
            with self._lock:
                if self._credential_store is None:
                    self._credential_store = CredentialStore(self.settings_storage)
        return self._credential_store

    @property
    def link_generator(self) -> LinkServicePort:
        """获取 URL Link 生成器"""
        if self._link_generator is None:
            with self._lock:
                if self._link_generator is None:
                    self._link_generator = LinkGenerator(
                        store=self.credential_store,
                        exchange=self.link_exchange,
                        errors=self.errors,
                        max_concurrency=self.settings.link.max_concurrency,
                    )
        return self._link_generator

    @property
    def report_use_case(self) -> ReportErrorsUseCase:
        """获取错误报告用例"""
        if self._report_use_case is None:
            with self._lock:
                if self._report_use_case is None:
                    self._report_use_case = ReportErrorsUseCase(self.errors)
        return self._report_use_case

    # ---------------- 工厂方法 ----------------

    def _create_link_exchange(self) -> LinkExchangePort:
        from ..adapters.wechat_api import AccessTokenCache, WechatUrlLinkClient

        wechat = self.settings.wechat
        get_http_pool().configure(
            WECHAT_API_DOMAIN,
            ClientConfig(timeout=wechat.timeout, proxy=wechat.proxy),
        )
        cache = AccessTokenCache(
            cache_file=get_token_cache_file() if wechat.token_cache_enabled else None,
            refresh_margin=wechat.token_refresh_margin,
        )
        logger.debug("URL Link 客户端已创建")
        return WechatUrlLinkClient(base_url=wechat.api_base_url, token_cache=cache)

    def _create_report_delivery(self) -> ReportDeliveryPort:
        from ..adapters.reporting import FileReportDelivery, HttpReportDelivery

        endpoint = self.settings.report.endpoint
        if endpoint:
            delivery = HttpReportDelivery(endpoint)
            get_http_pool().configure(
                urlparse(endpoint).netloc,
                ClientConfig(timeout=self.settings.report.timeout),
            )
            logger.debug(f"错误报告将发送到 {delivery.name}")
            return delivery

        logger.debug("未配置错误报告地址，报告将保存到日志目录")
        return FileReportDelivery(get_log_dir())

    async def aclose(self) -> None:
        """关闭容器持有的网络资源"""
        await get_http_pool().close_all()
        logger.debug("容器资源已关闭")


# 全局容器实例
_container: Container | None = None


def get_container() -> Container:
    """获取全局容器实例"""
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    """重置容器（用于测试）"""
    global _container
    _container = None
