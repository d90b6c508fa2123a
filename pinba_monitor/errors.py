"""Structured error types for timer bookkeeping and configuration.

Engine call failures are not represented here: the engine reports them as
``False`` or empty results, and those are handed back to the caller as
values. The exceptions below cover local precondition violations only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Categories of monitoring errors."""

    TIMER = "timer"  # Registry key violations
    TAGS = "tags"  # Malformed tag sets
    CONFIGURATION = "configuration"  # Settings file, invalid values


@dataclass
class MonitoringError(Exception):
    """Base class for structured monitoring errors.

    Attributes:
        category: Error category for grouping.
        message: Human-readable error message.
        suggestion: Optional actionable recovery suggestion.
        details: Optional additional details dict.
    """

    category: ErrorCategory
    message: str
    suggestion: str | None = None
    details: dict[str, Any] | None = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Initialize the exception with the message."""
        super().__init__(self.message)

    def format(self, use_color: bool = True) -> str:
        """Format the error for display.

        Args:
            use_color: Whether to include ANSI color codes.

        Returns:
            Formatted error string with suggestion if available.
        """
        red = "\033[91m" if use_color else ""
        cyan = "\033[96m" if use_color else ""
        dim = "\033[2m" if use_color else ""
        reset = "\033[0m" if use_color else ""

        lines = [f"{red}Error:{reset} {self.message}"]

        if self.suggestion:
            lines.append(f"{cyan}Suggestion:{reset} {self.suggestion}")

        if self.details:
            for key, value in self.details.items():
                lines.append(f"{dim}  {key}: {value}{reset}")

        return "\n".join(lines)

    def __str__(self) -> str:
        """Return the formatted error message."""
        return self.format(use_color=False)


class DuplicateKeyError(MonitoringError):
    """A timer is already started under this key."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(
            category=ErrorCategory.TIMER,
            message=message or f"The timer is already started: {key}",
            suggestion="Stop or delete the running timer before starting it again",
            details={"key": key},
        )


class KeyNotFoundError(MonitoringError, KeyError):
    """No timer is registered under this key."""

    def __init__(self, key: str | None):
        self.key = key
        super().__init__(
            category=ErrorCategory.TIMER,
            message=f"Timer not found: {key}",
            suggestion="Start the timer before stopping, deleting or inspecting it",
            details={"key": key},
        )


class InvalidTagError(MonitoringError, ValueError):
    """Tag names must be non-numeric, non-empty strings."""

    def __init__(self, tag: Any):
        self.tag = tag
        super().__init__(
            category=ErrorCategory.TAGS,
            message=f"Invalid tag name: {tag!r}",
            suggestion='Use tags of the form {"tag": "value"} with non-numeric names',
            details={"tag": repr(tag)},
        )


class ConfigurationError(MonitoringError):
    """Error in the settings file or configuration values."""

    def __init__(
        self,
        message: str,
        config_file: str | None = None,
        suggestion: str | None = None,
    ):
        default_suggestion = "Check the settings file syntax and value types"
        super().__init__(
            category=ErrorCategory.CONFIGURATION,
            message=message,
            suggestion=suggestion or default_suggestion,
            details={"config_file": config_file} if config_file else None,
        )


__all__ = [
    "ErrorCategory",
    "MonitoringError",
    "DuplicateKeyError",
    "KeyNotFoundError",
    "InvalidTagError",
    "ConfigurationError",
]
