"""URL Link 请求与结果实体"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Union, overload

from ...shared.exceptions import NoValidItemsError, ValidationError


@dataclass(frozen=True)
class LinkRequestItem:
    """
    页面描述

    Attributes:
        path: 小程序页面路径，可为空（空路径的条目在生成前被过滤）
        query: 查询参数，原样透传，不做转义
    """

    path: str = ""
    query: str = ""

    @property
    def is_blank(self) -> bool:
        return not self.path.strip()

    @classmethod
    def parse(cls, text: str) -> LinkRequestItem:
        """解析 "path?query" 形式的文本

        Examples:
            >>> LinkRequestItem.parse("pages/index?id=1")
            LinkRequestItem(path='pages/index', query='id=1')
        """
        path, _, query = text.partition("?")
        return cls(path=path, query=query)


ItemLike = Union[LinkRequestItem, Mapping[str, Any], tuple[str, str], str]


def _coerce_item(raw: ItemLike) -> LinkRequestItem:
    if isinstance(raw, LinkRequestItem):
        return raw
    if isinstance(raw, str):
        return LinkRequestItem.parse(raw)
    if isinstance(raw, Mapping):
        return LinkRequestItem(
            path=str(raw.get("path") or ""),
            query=str(raw.get("query") or ""),
        )
    if isinstance(raw, tuple) and len(raw) == 2:
        return LinkRequestItem(path=str(raw[0] or ""), query=str(raw[1] or ""))
    raise ValidationError(f"无法识别的请求条目: {raw!r}")


@dataclass(frozen=True)
class LinkRequestBatch:
    """
    一次生成调用的有效请求列表

    路径去除空白后为空的条目被直接丢弃，不产生结果，也不计入"至少一条"的校验。
    """

    items: tuple[LinkRequestItem, ...]

    @classmethod
    def from_items(cls, items: Iterable[ItemLike]) -> LinkRequestBatch:
        """过滤并规范化请求条目

        Raises:
            NoValidItemsError: 过滤后没有有效条目
            ValidationError: 条目格式无法识别
        """
        valid = tuple(item for item in (_coerce_item(raw) for raw in items) if not item.is_blank)
        if not valid:
            raise NoValidItemsError()
        return cls(items=valid)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[LinkRequestItem]:
        return iter(self.items)


@dataclass(frozen=True)
class LinkResult:
    """
    单条生成结果

    不变式：link 与 error_message 有且仅有一个非空。
    """

    path: str
    query: str
    link: str = ""
    error_message: str = ""

    def __post_init__(self) -> None:
        if bool(self.link) == bool(self.error_message):
            raise ValueError("link 与 error_message 必须有且仅有一个非空")

    @property
    def ok(self) -> bool:
        return bool(self.link)

    @classmethod
    def success(cls, item: LinkRequestItem, link: str) -> LinkResult:
        return cls(path=item.path, query=item.query, link=link)

    @classmethod
    def failure(cls, item: LinkRequestItem, error_message: str) -> LinkResult:
        return cls(
            path=item.path,
            query=item.query,
            error_message=error_message or "未知错误",
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "path": self.path,
            "query": self.query,
            "link": self.link,
            "err_msg": self.error_message,
        }


@dataclass(frozen=True)
class LinkBatchResult:
    """一次批量生成的有序结果（与过滤后的请求一一对应）"""

    results: tuple[LinkResult, ...]

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[LinkResult]:
        return iter(self.results)

    @overload
    def __getitem__(self, index: int) -> LinkResult: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[LinkResult, ...]: ...

    def __getitem__(self, index):
        return self.results[index]

    @property
    def succeeded(self) -> tuple[LinkResult, ...]:
        return tuple(r for r in self.results if r.ok)

    @property
    def failed(self) -> tuple[LinkResult, ...]:
        return tuple(r for r in self.results if not r.ok)

    @property
    def links(self) -> str:
        """所有成功的链接，每行一个（"复制全部"的内容）"""
        return "\n".join(r.link for r in self.results if r.ok)
