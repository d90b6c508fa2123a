"""Configuration model for the monitoring facade."""

import logging
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class MonitoringConfig(BaseModel):
    """Monitoring configuration with validation."""

    # Global switch; read once when a gate is built
    enabled: bool = Field(default=False)

    # Request identity reported to the engine
    hostname: str | None = Field(default=None)
    server_name: str = Field(default="")
    script_name: str = Field(default="")
    request_schema: str = Field(default="")

    # Let default tags replace same-named caller tags
    defaults_override_tags: bool = Field(default=False)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: Literal["text", "json"] = Field(default="text")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        level = str(v).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("hostname")
    @classmethod
    def validate_hostname(cls, v: Any) -> str | None:
        if v is None:
            return None
        v = str(v).strip()
        return v or None
