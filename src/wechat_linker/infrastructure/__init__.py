"""基础设施层

包含：
- adapters: 微信接口、本地存储、错误报告投递
- config: 配置、路径与依赖注入容器
- observability: 全局异常钩子
"""
