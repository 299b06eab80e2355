"""依赖注入容器测试

测试 Container 类的依赖创建和管理功能。
"""

import asyncio

import pytest

from wechat_linker.application.use_cases import CredentialStore, LinkGenerator
from wechat_linker.infrastructure.adapters.http_client_pool import get_http_pool
from wechat_linker.infrastructure.adapters.reporting import FileReportDelivery, HttpReportDelivery
from wechat_linker.infrastructure.adapters.storage import LocalJsonSettingsStorage
from wechat_linker.infrastructure.adapters.wechat_api import WechatUrlLinkClient
from wechat_linker.infrastructure.config.container import (
    Container,
    get_container,
    reset_container,
)
from wechat_linker.infrastructure.config.settings import (
    AppSettings,
    ErrorLogSettings,
    ReportSettings,
    StorageSettings,
    WechatApiSettings,
)
from wechat_linker.shared.constants import WECHAT_API_DOMAIN


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    return AppSettings(
        storage=StorageSettings(settings_file=str(tmp_path / "settings.json")),
        error_log=ErrorLogSettings(persist=False),
        report=ReportSettings(endpoint=None),
        wechat=WechatApiSettings(token_cache_enabled=False),
    )


class TestContainer:
    """Container 测试"""

    @pytest.fixture(autouse=True)
    def reset(self) -> None:
        """每个测试前重置容器"""
        reset_container()

    @pytest.mark.unit
    def test_settings_storage_uses_override(self, settings: AppSettings, tmp_path) -> None:
        container = Container(settings=settings)

        storage = container.settings_storage

        assert isinstance(storage, LocalJsonSettingsStorage)
        assert storage.path == tmp_path / "settings.json"
        assert container.settings_storage is storage  # 缓存

    @pytest.mark.unit
    def test_credential_store_lazy_loading(self, settings: AppSettings) -> None:
        container = Container(settings=settings)
        assert container._credential_store is None

        store = container.credential_store

        assert isinstance(store, CredentialStore)
        assert store.profiles == ()
        assert container._credential_store is store

    @pytest.mark.unit
    def test_link_generator_wiring(self, settings: AppSettings) -> None:
        container = Container(settings=settings)

        generator = container.link_generator

        assert isinstance(generator, LinkGenerator)
        assert isinstance(container.link_exchange, WechatUrlLinkClient)
        assert generator._errors is container.errors
        assert generator._store is container.credential_store

    @pytest.mark.unit
    def test_single_error_aggregator(self, settings: AppSettings) -> None:
        container = Container(settings=settings)

        assert container.errors is container.errors
        assert container.report_use_case._errors is container.errors
        assert container.error_journal is None
        assert container.errors.max_records == settings.error_log.max_records

    @pytest.mark.unit
    def test_file_delivery_without_endpoint(self, settings: AppSettings) -> None:
        container = Container(settings=settings)

        assert isinstance(container.report_delivery, FileReportDelivery)

    @pytest.mark.unit
    def test_http_delivery_with_endpoint(self, settings: AppSettings) -> None:
        settings.report.endpoint = "https://reports.example.com/api/errors"
        container = Container(settings=settings)

        assert isinstance(container.report_delivery, HttpReportDelivery)

    @pytest.mark.unit
    def test_aclose_closes_pooled_clients(self, settings: AppSettings) -> None:
        container = Container(settings=settings)
        container.link_exchange  # 配置微信接口域名

        async def use_and_close() -> None:
            client = await get_http_pool().get_client(WECHAT_API_DOMAIN)
            assert not client.is_closed
            await container.aclose()
            assert client.is_closed

        asyncio.run(use_and_close())

        assert get_http_pool().active_clients == 0

    @pytest.mark.unit
    def test_global_container(self) -> None:
        first = get_container()

        assert get_container() is first
        reset_container()
        assert get_container() is not first
