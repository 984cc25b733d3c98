"""
流水线模块 - 生成请求编排
"""

from .executor import GenerationExecutor, order_sources

__all__ = [
    "GenerationExecutor",
    "order_sources",
]
