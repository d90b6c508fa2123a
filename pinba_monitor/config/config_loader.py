"""Configuration loading with environment and file support."""

import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import ConfigurationError
from ..monitoring_logging import get_logger
from .models import MonitoringConfig
from .settings_file import load_settings_file

logger = get_logger("config")

DEFAULT_SETTINGS_FILE = "pinba_monitor.ini"

ENV_VARS = {
    "enabled": "PINBA_ENABLED",
    "hostname": "PINBA_HOSTNAME",
    "server_name": "PINBA_SERVER_NAME",
    "script_name": "PINBA_SCRIPT_NAME",
    "request_schema": "PINBA_SCHEMA",
    "log_level": "PINBA_LOG_LEVEL",
}


class ConfigLoader:
    """Configuration loader merging file, environment and overrides."""

    def __init__(self, settings_file: Path | None = None):
        self.settings_file = (
            Path(settings_file)
            if settings_file is not None
            else Path.cwd() / DEFAULT_SETTINGS_FILE
        )

    def load(self, **overrides: Any) -> MonitoringConfig:
        """Load configuration from all sources.

        Precedence (highest to lowest):
        1. Explicit overrides
        2. Environment variables
        3. Settings file
        4. Defaults

        Raises:
            ConfigurationError: If the merged values fail validation.
        """
        config_dict: dict[str, Any] = {}

        config_dict.update(load_settings_file(self.settings_file))

        env_count = 0
        for key, env_var in ENV_VARS.items():
            value = os.environ.get(env_var)
            if value is not None:
                config_dict[key] = value
                env_count += 1
        if env_count > 0:
            logger.debug(f"Applied {env_count} environment variables")

        config_dict.update(overrides)
        if overrides:
            logger.debug(f"Applied {len(overrides)} explicit overrides")

        try:
            return MonitoringConfig(**config_dict)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid monitoring configuration: {e}",
                config_file=str(self.settings_file),
            ) from e


def load_config(settings_file: Path | None = None, **overrides: Any) -> MonitoringConfig:
    """Load configuration from multiple sources with precedence.

    Args:
        settings_file: Settings file path; defaults to ./pinba_monitor.ini
        **overrides: Explicit configuration overrides

    Returns:
        Validated MonitoringConfig instance
    """
    return ConfigLoader(settings_file).load(**overrides)
