"""Plain ``key=value`` settings file parsing.

Keys may carry the ``pinba.`` prefix used by ini-style configuration
(``pinba.enabled=1``). Values are kept as strings; type conversion is left
to the configuration model.
"""

from pathlib import Path
from typing import Any

from ..errors import ConfigurationError
from ..monitoring_logging import get_logger

logger = get_logger("config")

KEY_PREFIX = "pinba."

# Settings file names that differ from MonitoringConfig fields
KEY_MAPPING = {
    "schema": "request_schema",
    "host_name": "hostname",
}


def _normalize_key(key: str) -> str:
    key = key.strip().lower()
    if key.startswith(KEY_PREFIX):
        key = key[len(KEY_PREFIX) :]
    return KEY_MAPPING.get(key, key)


def load_settings_file(settings_file: Path) -> dict[str, Any]:
    """Load configuration values from a settings file.

    Args:
        settings_file: Path to the file.

    Returns:
        Mapping of config field names to raw string values; empty if the
        file does not exist.

    Raises:
        ConfigurationError: If the file cannot be read.
    """
    settings: dict[str, Any] = {}

    if not settings_file.exists():
        return settings

    try:
        text = settings_file.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read settings file: {e}", config_file=str(settings_file)
        ) from e

    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.split(" #", 1)[0].strip()
        if not line or line.startswith(("#", ";", "[")):
            continue
        if "=" not in line:
            logger.warning(f"{settings_file}:{lineno}: ignoring line without '='")
            continue

        key, value = line.split("=", 1)
        key = _normalize_key(key)
        if not key:
            continue
        settings[key] = value.strip().strip('"').strip("'")

    logger.debug(f"Loaded {len(settings)} settings from {settings_file}")
    return settings


def create_default_settings_file(path: Path) -> None:
    """Write a commented settings file template."""
    template = """# pinba_monitor settings
# Lines starting with # are comments

# Global switch (1/0, true/false)
pinba.enabled=0

# Request identity
pinba.server_name=
pinba.script_name=
pinba.schema=
# pinba.hostname=web-01

# Let default tags (__hostname, __server_name) replace caller tags
defaults_override_tags=false

# Logging
log_level=INFO
log_format=text
"""
    path.write_text(template, encoding="utf-8")
    logger.info(f"Created default settings file: {path}")
