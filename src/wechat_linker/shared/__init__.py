"""共享层

包含跨层共享的工具、常量、异常定义。
"""

from . import constants, exceptions, utils

__all__ = [
    "constants",
    "exceptions",
    "utils",
]
