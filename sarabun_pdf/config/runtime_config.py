"""
运行期配置 - 读取 config/sarabun_runtime.yaml

职责：
- 加载字体路径/合并阈值/日志等运行参数
- 提供环境变量覆盖机制（前缀 SARABUN_，嵌套分隔符 __）
- 类型安全的配置访问

注意：页面几何、页边距、字号与锚点坐标是编译期常量（layout/constants.py），不属于配置。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

DEFAULT_CONFIG_PATH = Path("config/sarabun_runtime.yaml")


class FontConfig(BaseModel):
    """字体配置"""

    family: str = "THSarabunNew"
    regular_path: str = "fonts/THSarabunNew.ttf"
    bold_path: str = "fonts/THSarabunNew Bold.ttf"


class MergeConfig(BaseModel):
    """合并配置"""

    spill_threshold_bytes: int = 10 * 1024 * 1024
    temp_dir: str | None = None


class LayoutConfig(BaseModel):
    """版面配置"""

    debug_borders: bool = False
    field_name_dedupe: bool = True


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_to_file: bool = False
    log_file: str = "logs/sarabun_pdf.log"


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    base_dir: Path = Path(".")

    # 各子配置
    fonts: FontConfig = Field(default_factory=FontConfig)
    merge: MergeConfig = Field(default_factory=MergeConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "SARABUN_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        config = cls(
            base_dir=path.parent,
            fonts=FontConfig(**cls._extract(runtime_opts, "fonts")),
            merge=MergeConfig(**cls._extract(runtime_opts, "merge")),
            layout=LayoutConfig(**cls._extract(runtime_opts, "layout")),
            logging=LoggingConfig(**cls._extract(runtime_opts, "logging")),
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        for attr in ("regular_path", "bold_path"):
            font_path = Path(getattr(self.fonts, attr))
            if not font_path.is_absolute():
                setattr(self.fonts, attr, str((base_dir / font_path).resolve()))
        if self.merge.temp_dir:
            temp_dir = Path(self.merge.temp_dir)
            if not temp_dir.is_absolute():
                self.merge.temp_dir = str((base_dir / temp_dir).resolve())


def configure_logging(config: RuntimeConfig | None = None) -> None:
    """按配置初始化标准库日志"""
    config = config or get_config()
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.logging.log_to_file:
        log_file = Path(config.logging.log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=config.logging.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


# 全局配置实例
_config: RuntimeConfig | None = None


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_CONFIG_PATH
    _config = RuntimeConfig.from_yaml(path)
    return _config
