"""Unit tests for configuration management."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from pinba_monitor.config import (
    ConfigLoader,
    MonitoringConfig,
    create_default_settings_file,
    load_config,
    load_settings_file,
)
from pinba_monitor.errors import ConfigurationError


class TestMonitoringConfig:
    """Tests for the configuration model."""

    def test_defaults(self):
        config = MonitoringConfig()
        assert config.enabled is False
        assert config.hostname is None
        assert config.server_name == ""
        assert config.defaults_override_tags is False
        assert config.log_level == "INFO"
        assert config.log_format == "text"

    @pytest.mark.parametrize(
        "raw,expected",
        [("1", True), ("0", False), ("true", True), ("off", False), ("yes", True)],
    )
    def test_enabled_parsing(self, raw, expected):
        assert MonitoringConfig(enabled=raw).enabled is expected

    def test_log_level_normalized(self):
        assert MonitoringConfig(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            MonitoringConfig(log_level="LOUD")

    def test_invalid_log_format(self):
        with pytest.raises(ValidationError):
            MonitoringConfig(log_format="xml")

    def test_blank_hostname_is_none(self):
        assert MonitoringConfig(hostname="  ").hostname is None


class TestSettingsFile:
    """Tests for key=value settings files."""

    def test_missing_file(self, tmp_path):
        assert load_settings_file(tmp_path / "absent.ini") == {}

    def test_parsing(self, tmp_path):
        settings = tmp_path / "pinba_monitor.ini"
        settings.write_text(
            "# comment\n"
            "[pinba]\n"
            "pinba.enabled=1\n"
            "pinba.server_name = shop  # trailing comment\n"
            "pinba.schema=https\n"
            "hostname=\"web-01\"\n"
            "no equals sign\n"
            "\n"
        )
        assert load_settings_file(settings) == {
            "enabled": "1",
            "server_name": "shop",
            "request_schema": "https",
            "hostname": "web-01",
        }

    def test_default_template_loads(self, tmp_path):
        """The generated template is a valid configuration."""
        path = tmp_path / "pinba_monitor.ini"
        create_default_settings_file(path)
        config = MonitoringConfig(**load_settings_file(path))
        assert config.enabled is False
        assert config.hostname is None


class TestLoadConfig:
    """Tests for load_config precedence."""

    def test_defaults_without_sources(self, tmp_path, clean_env):
        config = load_config(tmp_path / "absent.ini")
        assert config == MonitoringConfig()

    def test_default_path_is_cwd(self, tmp_path, clean_env):
        clean_env.chdir(tmp_path)
        (tmp_path / "pinba_monitor.ini").write_text("pinba.enabled=1\n")
        assert ConfigLoader().settings_file == Path.cwd() / "pinba_monitor.ini"
        assert load_config().enabled is True

    def test_file_values(self, tmp_path, clean_env):
        settings = tmp_path / "settings.ini"
        settings.write_text("pinba.enabled=1\npinba.server_name=shop\n")
        config = load_config(settings)
        assert config.enabled is True
        assert config.server_name == "shop"

    def test_env_overrides_file(self, tmp_path, clean_env):
        settings = tmp_path / "settings.ini"
        settings.write_text("pinba.enabled=1\npinba.server_name=shop\n")
        clean_env.setenv("PINBA_ENABLED", "0")
        clean_env.setenv("PINBA_SCHEMA", "https")

        config = load_config(settings)
        assert config.enabled is False
        assert config.server_name == "shop"
        assert config.request_schema == "https"

    def test_overrides_win(self, tmp_path, clean_env):
        clean_env.setenv("PINBA_ENABLED", "0")
        config = load_config(tmp_path / "absent.ini", enabled=True)
        assert config.enabled is True

    def test_invalid_value_raises(self, tmp_path, clean_env):
        settings = tmp_path / "settings.ini"
        settings.write_text("pinba.enabled=maybe\n")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(settings)
        assert exc_info.value.details == {"config_file": str(settings)}
