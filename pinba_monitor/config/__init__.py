"""Configuration package.

Configuration Precedence (highest to lowest):
1. Explicit overrides
2. Environment variables (PINBA_ENABLED, PINBA_HOSTNAME, ...)
3. Settings file (./pinba_monitor.ini by default)
4. Defaults
"""

from .config_loader import ConfigLoader, load_config
from .models import MonitoringConfig
from .settings_file import create_default_settings_file, load_settings_file

__all__ = [
    "ConfigLoader",
    "load_config",
    "MonitoringConfig",
    "create_default_settings_file",
    "load_settings_file",
]
