"""值对象"""

from .enums import EnvVersion, ErrorOrigin, ErrorSeverity

__all__ = [
    "EnvVersion",
    "ErrorOrigin",
    "ErrorSeverity",
]
