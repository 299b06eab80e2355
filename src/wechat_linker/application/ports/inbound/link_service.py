"""URL Link 生成服务入站端口"""

from collections.abc import Callable, Iterable
from typing import Protocol

from ....domain.entities import LinkBatchResult, LinkRequestItem
from ....domain.value_objects import EnvVersion


class LinkBatchProgress:
    """批量生成进度"""

    def __init__(self, total: int):
        self.total = total
        self.completed = 0
        self.success = 0
        self.failed = 0
        self.current_path: str = ""
        self.errors: list[tuple[str, str]] = []  # (path, error_message)

    def mark_success(self, path: str) -> None:
        self.completed += 1
        self.success += 1
        self.current_path = path

    def mark_failed(self, path: str, error: str) -> None:
        self.completed += 1
        self.failed += 1
        self.current_path = path
        self.errors.append((path, error))


# 进度回调类型
ProgressCallback = Callable[[LinkBatchProgress], None]


class LinkServicePort(Protocol):
    """
    URL Link 生成服务端口

    定义批量生成 URL Link 的服务接口。
    """

    async def generate(
        self,
        profile_id: str | None,
        env_version: EnvVersion | str,
        items: Iterable[LinkRequestItem],
        on_progress: ProgressCallback | None = None,
    ) -> LinkBatchResult:
        """
        批量生成 URL Link

        Args:
            profile_id: 凭据 id
            env_version: 小程序版本
            items: 候选请求条目
            on_progress: 进度回调函数

        Returns:
            与有效条目一一对应的有序结果

        Raises:
            NoProfileSelectedError: 凭据为空或不存在
            NoValidItemsError: 没有有效路径
        """
        ...
