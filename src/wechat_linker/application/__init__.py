"""应用层

应用层负责用例编排，协调领域层和基础设施层。

包含：
- ports: 端口定义（入站/出站）
- services: 应用服务（错误汇总器）
- use_cases: 应用用例
- dto: 数据传输对象
"""

from . import dto, ports, services, use_cases

__all__ = [
    "dto",
    "ports",
    "services",
    "use_cases",
]
