"""微信开放接口适配器

提供 access_token 缓存与小程序 URL Link 生成功能。
"""

from .token_cache import AccessTokenCache, CachedToken
from .urllink_client import WechatUrlLinkClient

__all__ = [
    "AccessTokenCache",
    "CachedToken",
    "WechatUrlLinkClient",
]
