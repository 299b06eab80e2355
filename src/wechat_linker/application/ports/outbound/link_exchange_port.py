"""URL Link 兑换出站端口"""

from typing import Protocol, runtime_checkable

from ....domain.value_objects import EnvVersion


@runtime_checkable
class LinkExchangePort(Protocol):
    """
    URL Link 兑换端口

    定义一次小程序 URL Link 兑换调用的接口，由微信接口适配器实现。
    """

    async def exchange(
        self,
        app_id: str,
        app_secret: str,
        env_version: EnvVersion,
        path: str,
        query: str,
    ) -> str:
        """
        兑换一条 URL Link

        Args:
            app_id: 小程序 AppID
            app_secret: 小程序 AppSecret
            env_version: 小程序版本
            path: 页面路径
            query: 查询参数（原样透传）

        Returns:
            生成的 URL Link

        Raises:
            LinkExchangeError: 传输失败、响应异常或接口返回错误
        """
        ...
