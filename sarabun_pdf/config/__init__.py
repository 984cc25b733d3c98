"""
配置层 - 加载运行期配置

职责：
- 加载 config/sarabun_runtime.yaml（运行期参数）
- 环境变量覆盖（SARABUN_ 前缀）
- 初始化日志
"""

from .runtime_config import (
    FontConfig,
    LayoutConfig,
    LoggingConfig,
    MergeConfig,
    RuntimeConfig,
    configure_logging,
    get_config,
    reload_config,
)

__all__ = [
    "RuntimeConfig",
    "FontConfig",
    "MergeConfig",
    "LayoutConfig",
    "LoggingConfig",
    "configure_logging",
    "get_config",
    "reload_config",
]
