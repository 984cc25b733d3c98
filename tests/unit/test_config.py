"""
配置加载单元测试

每个模块完成后必须运行：pytest tests/unit/test_config.py -v
"""

import logging
from pathlib import Path

import pytest

from sarabun_pdf.config import RuntimeConfig, configure_logging, reload_config

REPO_CONFIG = Path(__file__).resolve().parents[2] / "config" / "sarabun_runtime.yaml"


class TestRuntimeConfig:
    """运行期配置测试"""

    def test_default_config(self, runtime_config: RuntimeConfig):
        """测试默认配置"""
        assert runtime_config.merge.spill_threshold_bytes == 10 * 1024 * 1024
        assert runtime_config.layout.field_name_dedupe is True
        assert runtime_config.layout.debug_borders is False
        assert runtime_config.logging.log_level == "INFO"

    def test_load_repo_yaml(self):
        """测试加载仓库内的配置文件"""
        config = RuntimeConfig.from_yaml(REPO_CONFIG)
        assert config.fonts.family == "THSarabunNew"
        assert config.merge.spill_threshold_bytes == 10485760
        assert Path(config.fonts.regular_path).is_absolute()
        assert Path(config.fonts.regular_path).parent.name == "fonts"

    def test_load_yaml_with_defaults(self, temp_dir: Path):
        """测试 {default: ...} 与直接取值两种写法"""
        path = temp_dir / "runtime.yaml"
        path.write_text(
            "runtime_options:\n"
            "  merge:\n"
            "    spill_threshold_bytes:\n"
            "      default: 2048\n"
            "    temp_dir: spill\n"
            "  layout:\n"
            "    debug_borders: true\n",
            encoding="utf-8",
        )
        config = RuntimeConfig.from_yaml(path)
        assert config.merge.spill_threshold_bytes == 2048
        assert config.merge.temp_dir == str((temp_dir / "spill").resolve())
        assert config.layout.debug_borders is True

    def test_missing_yaml_uses_defaults(self, temp_dir: Path):
        """测试配置文件不存在时使用默认值"""
        config = RuntimeConfig.from_yaml(temp_dir / "missing.yaml")
        assert config.merge.spill_threshold_bytes == 10 * 1024 * 1024

    def test_env_override(self, monkeypatch):
        """测试环境变量覆盖"""
        monkeypatch.setenv("SARABUN_MERGE__SPILL_THRESHOLD_BYTES", "4096")
        monkeypatch.setenv("SARABUN_LAYOUT__FIELD_NAME_DEDUPE", "false")
        config = RuntimeConfig()
        assert config.merge.spill_threshold_bytes == 4096
        assert config.layout.field_name_dedupe is False

    def test_reload_config(self, temp_dir: Path):
        """测试重新加载全局配置"""
        path = temp_dir / "runtime.yaml"
        path.write_text("runtime_options:\n  logging:\n    log_level: DEBUG\n", encoding="utf-8")
        config = reload_config(path)
        assert config.logging.log_level == "DEBUG"
        reload_config(temp_dir / "missing.yaml")


class TestConfigureLogging:
    """日志初始化测试"""

    def test_log_to_file(self, temp_dir: Path):
        """测试写入日志文件"""
        config = RuntimeConfig()
        config.logging.log_level = "WARNING"
        config.logging.log_to_file = True
        config.logging.log_file = str(temp_dir / "logs" / "run.log")

        configure_logging(config)
        try:
            assert logging.getLogger().level == logging.WARNING
            assert (temp_dir / "logs").is_dir()
        finally:
            for handler in logging.getLogger().handlers[:]:
                handler.close()
                logging.getLogger().removeHandler(handler)
