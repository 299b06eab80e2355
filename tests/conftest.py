"""测试夹具和共享配置

提供测试中常用的夹具：
- 内存配置存储、可控的 URL Link 兑换器、内存错误报告投递
- 预置凭据的凭据仓库
- 错误汇总器
"""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from wechat_linker.application.services import ErrorAggregator
from wechat_linker.application.use_cases import CredentialStore
from wechat_linker.domain.entities import CredentialProfile, CredentialSnapshot, ErrorRecord
from wechat_linker.domain.value_objects import EnvVersion
from wechat_linker.infrastructure.adapters.http_client_pool import HttpClientPool
from wechat_linker.shared.exceptions import DeliveryError, LinkExchangeError, StorageWriteError


# ============== 端口替身 ==============


class InMemorySettingsStorage:
    """内存配置存储，可模拟写入失败"""

    def __init__(self, snapshot: CredentialSnapshot | None = None):
        self.snapshot = snapshot or CredentialSnapshot()
        self.saves: list[CredentialSnapshot] = []
        self.fail_on_save = False

    def load(self) -> CredentialSnapshot:
        return self.snapshot

    def save(self, snapshot: CredentialSnapshot) -> None:
        if self.fail_on_save:
            raise StorageWriteError("磁盘已满")
        self.saves.append(snapshot)
        self.snapshot = snapshot


class FakeLinkExchange:
    """
    可控的 URL Link 兑换器

    outcomes 以 path 为键：值为字符串时返回该链接，为异常时抛出。
    未配置的 path 返回 https://wxaurl.cn/<path>。
    """

    def __init__(self, outcomes: dict[str, object] | None = None):
        self.outcomes = outcomes or {}
        self.calls: list[tuple[str, str, EnvVersion, str, str]] = []

    async def exchange(
        self,
        app_id: str,
        app_secret: str,
        env_version: EnvVersion,
        path: str,
        query: str,
    ) -> str:
        self.calls.append((app_id, app_secret, env_version, path, query))
        outcome = self.outcomes.get(path, f"https://wxaurl.cn/{path.strip('/')}")
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome  # type: ignore[return-value]


class RecordingDelivery:
    """记录投递内容的错误报告投递"""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.delivered: list[tuple[str, tuple[ErrorRecord, ...]]] = []

    @property
    def name(self) -> str:
        return "memory"

    async def deliver(self, contact: str, records: Sequence[ErrorRecord]) -> None:
        if self.error is not None:
            raise self.error
        self.delivered.append((contact, tuple(records)))


class InMemoryErrorJournal:
    """内存错误日志存储"""

    def __init__(self, records: list[ErrorRecord] | None = None):
        self.records = list(records or [])
        self.save_count = 0

    def load(self) -> list[ErrorRecord]:
        return list(self.records)

    def save(self, records: Sequence[ErrorRecord]) -> None:
        self.save_count += 1
        self.records = list(records)


# ============== 基础夹具 ==============


@pytest.fixture
def sample_profile() -> CredentialProfile:
    """示例凭据"""
    return CredentialProfile.create("商城", "wx1234567890abcd", "secret-abc")


@pytest.fixture
def settings_storage(sample_profile: CredentialProfile) -> InMemorySettingsStorage:
    """预置一个默认凭据的内存存储"""
    return InMemorySettingsStorage(CredentialSnapshot((sample_profile,), sample_profile.id))


@pytest.fixture
def empty_storage() -> InMemorySettingsStorage:
    """空的内存存储"""
    return InMemorySettingsStorage()


@pytest.fixture
def store(settings_storage: InMemorySettingsStorage) -> CredentialStore:
    """预置凭据的凭据仓库"""
    return CredentialStore(settings_storage)


@pytest.fixture
def exchange() -> FakeLinkExchange:
    """默认全部成功的兑换器"""
    return FakeLinkExchange()


@pytest.fixture
def delivery() -> RecordingDelivery:
    return RecordingDelivery()


@pytest.fixture
def errors(delivery: RecordingDelivery) -> ErrorAggregator:
    """错误汇总器"""
    return ErrorAggregator(delivery=delivery)


@pytest.fixture
def remote_error() -> LinkExchangeError:
    """微信接口返回的错误"""
    return LinkExchangeError("invalid path (errcode=40165)", errcode=40165, remote=True)


@pytest.fixture
def delivery_error() -> DeliveryError:
    return DeliveryError("错误报告发送失败: HTTP 500")


@pytest.fixture
def make_exchange():
    """按 path 配置结果的兑换器工厂"""
    return FakeLinkExchange


@pytest.fixture
def make_delivery():
    """错误报告投递工厂"""
    return RecordingDelivery


@pytest.fixture
def make_journal():
    """内存错误日志存储工厂"""
    return InMemoryErrorJournal


@pytest.fixture(autouse=True)
def reset_http_pool():
    """每个测试使用全新的连接池"""
    HttpClientPool.reset()
    yield
    HttpClientPool.reset()
