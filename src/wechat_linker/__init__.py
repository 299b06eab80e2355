"""微信小程序 URL Link 生成器

管理多个小程序的 AppID/AppSecret，批量生成可在微信外打开的 URL Link，
并收集运行中的错误以便提交报告。

架构：
- 领域驱动设计 (DDD) + 六边形架构 (Hexagonal Architecture)

使用方式：
    python -m wechat_linker profile add <名称> <AppID> <AppSecret>
    python -m wechat_linker generate pages/index "pages/detail?id=1"
"""

from .shared.constants import APP_NAME, VERSION

__version__ = VERSION
__app_name__ = APP_NAME

__all__ = ["__version__", "__app_name__"]
