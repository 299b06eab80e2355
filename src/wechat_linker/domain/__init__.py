"""领域层

包含：
- entities: 凭据、URL Link 请求/结果、错误记录
- value_objects: 封闭枚举（小程序版本、错误来源、错误级别）
"""

from . import entities, value_objects

__all__ = [
    "entities",
    "value_objects",
]
