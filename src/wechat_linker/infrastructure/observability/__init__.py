"""可观测性：全局异常捕获"""

from .exception_hooks import asyncio_exception_handler, install_exception_hooks, run_with_capture

__all__ = [
    "asyncio_exception_handler",
    "install_exception_hooks",
    "run_with_capture",
]
