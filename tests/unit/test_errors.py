"""Tests for structured monitoring errors."""

import pytest

from pinba_monitor.errors import (
    ConfigurationError,
    DuplicateKeyError,
    ErrorCategory,
    InvalidTagError,
    KeyNotFoundError,
    MonitoringError,
)


class TestErrors:
    """Tests for error types."""

    def test_duplicate_key(self):
        """DuplicateKeyError carries the key and a timer category."""
        error = DuplicateKeyError("render")
        assert isinstance(error, MonitoringError)
        assert error.key == "render"
        assert error.category == ErrorCategory.TIMER
        assert "render" in str(error)

    def test_duplicate_key_custom_message(self):
        """A custom message replaces the default one."""
        error = DuplicateKeyError("k", "Another timer is already started")
        assert error.message == "Another timer is already started"

    def test_key_not_found_is_key_error(self):
        """KeyNotFoundError can be caught as KeyError."""
        with pytest.raises(KeyError):
            raise KeyNotFoundError("missing")

    def test_key_not_found_str_is_formatted(self):
        """str() gives the formatted message rather than a quoted repr."""
        error = KeyNotFoundError("missing")
        assert str(error).startswith("Error: Timer not found: missing")

    def test_invalid_tag_is_value_error(self):
        """InvalidTagError can be caught as ValueError."""
        error = InvalidTagError(5)
        assert isinstance(error, ValueError)
        assert error.category == ErrorCategory.TAGS

    def test_format_without_color(self):
        """format() includes suggestion and details."""
        error = ConfigurationError("Bad value", config_file="pinba_monitor.ini")
        text = error.format(use_color=False)
        assert "Error: Bad value" in text
        assert "Suggestion:" in text
        assert "config_file: pinba_monitor.ini" in text
        assert "\033[" not in text

    def test_format_with_color(self):
        """format() adds ANSI codes when asked."""
        assert "\033[91m" in DuplicateKeyError("k").format(use_color=True)
