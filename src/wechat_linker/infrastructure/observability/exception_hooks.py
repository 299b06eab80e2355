"""全局异常钩子

把宿主进程中未捕获的同步异常、线程异常与 asyncio 未处理异常
以 origin=local 写入错误汇总器。
"""

from __future__ import annotations

import asyncio
import sys
import threading
import traceback
from collections.abc import Callable
from typing import Any

from ...application.services import ErrorAggregator
from ...domain.value_objects import ErrorOrigin, ErrorSeverity


def install_exception_hooks(errors: ErrorAggregator) -> Callable[[], None]:
    """
    安装 sys.excepthook 与 threading.excepthook

    原有钩子仍会被调用。

    Returns:
        恢复原有钩子的函数
    """
    previous_excepthook = sys.excepthook
    previous_thread_hook = threading.excepthook

    def excepthook(exc_type, exc_value, exc_tb) -> None:
        if not issubclass(exc_type, KeyboardInterrupt):
            errors.capture(
                str(exc_value) or exc_type.__name__,
                stack="".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
                origin=ErrorOrigin.LOCAL,
                severity=ErrorSeverity.ERROR,
            )
        previous_excepthook(exc_type, exc_value, exc_tb)

    def thread_excepthook(args: threading.ExceptHookArgs) -> None:
        if args.exc_type is not SystemExit and args.exc_value is not None:
            errors.capture(
                f"线程 {args.thread.name if args.thread else '?'} 异常: {args.exc_value}",
                stack="".join(
                    traceback.format_exception(args.exc_type, args.exc_value, args.exc_traceback)
                ),
                origin=ErrorOrigin.LOCAL,
                severity=ErrorSeverity.ERROR,
            )
        previous_thread_hook(args)

    sys.excepthook = excepthook
    threading.excepthook = thread_excepthook

    def restore() -> None:
        sys.excepthook = previous_excepthook
        threading.excepthook = previous_thread_hook

    return restore


def asyncio_exception_handler(
    errors: ErrorAggregator,
) -> Callable[[asyncio.AbstractEventLoop, dict[str, Any]], None]:
    """
    创建 asyncio 事件循环的异常处理器

    使用方法:
        loop.set_exception_handler(asyncio_exception_handler(errors))
    """

    def handler(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        exc = context.get("exception")
        if isinstance(exc, BaseException):
            errors.capture_exception(exc, origin=ErrorOrigin.LOCAL)
        else:
            errors.capture(
                context.get("message") or "Unhandled asyncio exception",
                origin=ErrorOrigin.LOCAL,
            )
        loop.default_exception_handler(context)

    return handler


def run_with_capture(coro, errors: ErrorAggregator):
    """运行协程，期间安装 asyncio 异常处理器"""

    async def runner():
        asyncio.get_running_loop().set_exception_handler(asyncio_exception_handler(errors))
        return await coro

    return asyncio.run(runner())
