"""URL Link 批量生成测试"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pytest

from wechat_linker.application.ports.inbound import LinkBatchProgress
from wechat_linker.application.services import ErrorAggregator
from wechat_linker.application.use_cases import CredentialStore, LinkGenerator
from wechat_linker.domain.entities import LinkRequestItem, LinkResult
from wechat_linker.domain.value_objects import EnvVersion, ErrorOrigin, ErrorSeverity
from wechat_linker.shared.exceptions import (
    AccessTokenError,
    NoProfileSelectedError,
    NoValidItemsError,
    ValidationError,
)


@pytest.mark.unit
class TestPreconditions:
    """前置条件失败时不发起远程调用"""

    @pytest.mark.asyncio
    async def test_unknown_profile(self, store: CredentialStore, exchange: Any) -> None:
        generator = LinkGenerator(store, exchange)

        with pytest.raises(NoProfileSelectedError):
            await generator.generate("missing", "release", ["pages/index"])

        assert exchange.calls == []

    @pytest.mark.asyncio
    async def test_no_profile_id(self, store: CredentialStore, exchange: Any) -> None:
        generator = LinkGenerator(store, exchange)

        with pytest.raises(NoProfileSelectedError):
            await generator.generate(None, "release", ["pages/index"])

        assert exchange.calls == []

    @pytest.mark.asyncio
    async def test_all_blank_paths(self, store: CredentialStore, exchange: Any) -> None:
        generator = LinkGenerator(store, exchange)

        with pytest.raises(NoValidItemsError):
            await generator.generate(
                store.default_profile_id,
                "release",
                [{"path": "", "query": "a=1"}, {"path": "   "}],
            )

        assert exchange.calls == []

    @pytest.mark.asyncio
    async def test_invalid_env_version(self, store: CredentialStore, exchange: Any) -> None:
        generator = LinkGenerator(store, exchange)

        with pytest.raises(ValidationError):
            await generator.generate(store.default_profile_id, "beta", ["pages/index"])

        assert exchange.calls == []

    def test_max_concurrency_must_be_positive(self, store: CredentialStore, exchange: Any) -> None:
        with pytest.raises(ValueError):
            LinkGenerator(store, exchange, max_concurrency=0)


@pytest.mark.unit
class TestGenerate:
    """批量生成"""

    @pytest.mark.asyncio
    async def test_blank_items_filtered(self, store: CredentialStore, exchange: Any) -> None:
        generator = LinkGenerator(store, exchange)

        result = await generator.generate(
            store.default_profile_id,
            "release",
            [{"path": "pages/index", "query": "id=1"}, {"path": "", "query": "x=1"}],
        )

        assert len(result) == 1
        assert result[0].path == "pages/index"
        assert result[0].query == "id=1"
        assert result[0].ok

    @pytest.mark.asyncio
    async def test_exchange_receives_profile_and_env(
        self,
        store: CredentialStore,
        exchange: Any,
    ) -> None:
        profile = store.default_profile
        assert profile is not None
        generator = LinkGenerator(store, exchange)

        await generator.generate(profile.id, EnvVersion.TRIAL, ["pages/detail?sku=42"])

        assert exchange.calls == [
            (profile.app_id, profile.app_secret, EnvVersion.TRIAL, "pages/detail", "sku=42")
        ]

    @pytest.mark.asyncio
    async def test_failed_item_does_not_stop_batch(
        self,
        store: CredentialStore,
        make_exchange,
    ) -> None:
        exchange = make_exchange({"pages/a": httpx.ConnectError("connection refused")})
        generator = LinkGenerator(store, exchange)

        result = await generator.generate(
            store.default_profile_id,
            "release",
            ["pages/a", "pages/b"],
        )

        assert [call[3] for call in exchange.calls] == ["pages/a", "pages/b"]
        failed, succeeded = result[0], result[1]
        assert failed.path == "pages/a"
        assert failed.link == ""
        assert failed.error_message
        assert succeeded.ok
        assert result.failed == (failed,)

    @pytest.mark.asyncio
    async def test_exactly_one_of_link_or_error(
        self,
        store: CredentialStore,
        make_exchange,
        remote_error,
    ) -> None:
        exchange = make_exchange({"pages/bad": remote_error, "pages/empty": ""})
        generator = LinkGenerator(store, exchange)

        result = await generator.generate(
            store.default_profile_id,
            "develop",
            ["pages/ok", "pages/bad", "pages/empty"],
        )

        assert len(result) == 3
        for item in result:
            assert bool(item.link) != bool(item.error_message)
        assert [r.ok for r in result] == [True, False, False]

    @pytest.mark.asyncio
    async def test_generate_with_default(self, store: CredentialStore, exchange: Any) -> None:
        generator = LinkGenerator(store, exchange)

        result = await generator.generate_with_default("release", ["pages/index"])

        assert result.links == "https://wxaurl.cn/pages/index"

    @pytest.mark.asyncio
    async def test_progress_callback(self, store: CredentialStore, make_exchange) -> None:
        exchange = make_exchange({"pages/b": RuntimeError("boom")})
        generator = LinkGenerator(store, exchange)
        seen: list[tuple[int, int, int]] = []

        def on_progress(progress: LinkBatchProgress) -> None:
            seen.append((progress.completed, progress.success, progress.failed))

        await generator.generate(
            store.default_profile_id,
            "release",
            ["pages/a", "pages/b"],
            on_progress=on_progress,
        )

        assert seen == [(1, 1, 0), (2, 1, 1)]


@pytest.mark.unit
class TestErrorCapture:
    """单条失败写入错误汇总器"""

    @pytest.mark.asyncio
    async def test_remote_error_is_captured_as_remote(
        self,
        store: CredentialStore,
        make_exchange,
        remote_error,
        errors: ErrorAggregator,
    ) -> None:
        exchange = make_exchange({"pages/a": remote_error})
        generator = LinkGenerator(store, exchange, errors=errors)

        await generator.generate(store.default_profile_id, "release", ["pages/a", "pages/b"])

        assert len(errors) == 1
        record = errors.records[0]
        assert record.origin is ErrorOrigin.REMOTE
        assert record.severity is ErrorSeverity.WARNING
        assert "pages/a" in record.message

    @pytest.mark.asyncio
    async def test_transport_error_is_captured_as_local(
        self,
        store: CredentialStore,
        make_exchange,
        errors: ErrorAggregator,
    ) -> None:
        exchange = make_exchange({"pages/a": AccessTokenError("请求超时: ReadTimeout")})
        generator = LinkGenerator(store, exchange, errors=errors)

        result = await generator.generate(store.default_profile_id, "release", ["pages/a"])

        assert result[0].error_message == "请求超时: ReadTimeout"
        assert errors.records[0].origin is ErrorOrigin.LOCAL

    @pytest.mark.asyncio
    async def test_precondition_failure_is_not_captured(
        self,
        store: CredentialStore,
        exchange: Any,
        errors: ErrorAggregator,
    ) -> None:
        generator = LinkGenerator(store, exchange, errors=errors)

        with pytest.raises(NoValidItemsError):
            await generator.generate(store.default_profile_id, "release", [""])

        assert len(errors) == 0


@pytest.mark.unit
class TestConcurrency:
    """并发生成保持输入顺序"""

    @pytest.mark.asyncio
    async def test_results_keep_input_order(self, store: CredentialStore) -> None:
        delays = {"pages/slow": 0.05, "pages/medium": 0.02, "pages/fast": 0.0}
        active = 0
        peak = 0

        class SlowExchange:
            async def exchange(self, app_id, app_secret, env_version, path, query) -> str:
                nonlocal active, peak
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(delays[path])
                active -= 1
                return f"https://wxaurl.cn/{path}"

        generator = LinkGenerator(store, SlowExchange(), max_concurrency=2)

        result = await generator.generate(
            store.default_profile_id,
            "release",
            list(delays),
        )

        assert [r.path for r in result] == list(delays)
        assert all(r.ok for r in result)
        assert peak == 2

    @pytest.mark.asyncio
    async def test_overlapping_calls_are_not_serialized(
        self,
        store: CredentialStore,
        exchange: Any,
    ) -> None:
        generator = LinkGenerator(store, exchange)

        first, second = await asyncio.gather(
            generator.generate(store.default_profile_id, "release", ["pages/a"]),
            generator.generate(store.default_profile_id, "release", ["pages/b"]),
        )

        assert first[0].path == "pages/a"
        assert second[0].path == "pages/b"


@pytest.mark.unit
class TestLinkResult:
    """结果实体不变式"""

    def test_failure_without_message_gets_placeholder(self) -> None:
        result = LinkResult.failure(LinkRequestItem("pages/a"), "")

        assert result.error_message
        assert not result.ok

    def test_both_link_and_error_rejected(self) -> None:
        with pytest.raises(ValueError):
            LinkResult("pages/a", "", "https://wxaurl.cn/x", "boom")

    def test_to_dict_uses_err_msg_key(self) -> None:
        data = LinkResult.success(LinkRequestItem("pages/a", "q=1"), "https://wxaurl.cn/x").to_dict()

        assert data == {"path": "pages/a", "query": "q=1", "link": "https://wxaurl.cn/x", "err_msg": ""}
