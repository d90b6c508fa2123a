"""Centralized logging configuration for pinba_monitor.

Provides:
- Structured JSON logging support
- Optional rotating file handler
- Timer-aware extra fields (operation, timer key, tags, duration)
- Debug context manager
"""

import json
import logging
import logging.handlers
from collections.abc import Generator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

LOGGER_NAME = "pinba_monitor"

# Extra record attributes copied into JSON entries when present
EXTRA_FIELDS = ("operation", "timer_key", "tags", "duration_ms", "request")


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Produces one JSON object per record with consistent fields and the
    timer context passed through ``extra=``.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: The log record to format.

        Returns:
            JSON string representation of the log entry.
        """
        log_entry: dict = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(
    level: str = "INFO",
    quiet: bool = False,
    verbose: bool = False,
    log_file: Path | None = None,
    log_format: str = "text",
    rotation_count: int = 3,
    max_bytes: int = 10485760,
) -> "logging.Logger":
    """Setup logging for the pinba_monitor logger hierarchy.

    Args:
        level: Base log level (DEBUG, INFO, WARNING, ERROR).
        quiet: Suppress console output (only ERROR level).
        verbose: Enable debug-level output.
        log_file: Optional log file path; enables a rotating file handler.
        log_format: Output format ("text" or "json").
        rotation_count: Number of backup files (default 3).
        max_bytes: Max file size before rotation (default 10MB).

    Returns:
        Configured logger instance.
    """
    import logging.config

    if quiet:
        effective_level = "ERROR"
    elif verbose:
        effective_level = "DEBUG"
    else:
        effective_level = level.upper()

    console_formatter = "json" if log_format == "json" else "simple"
    file_formatter = "json" if log_format == "json" else "detailed"

    config: dict = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "simple": {"format": "%(levelname)s | %(message)s"},
            "json": {
                "()": JSONFormatter,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": console_formatter,
                "level": effective_level,
                "stream": "ext://sys.stderr",
            }
        },
        "loggers": {
            LOGGER_NAME: {"handlers": ["console"], "level": "DEBUG", "propagate": False}
        },
    }

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": file_formatter,
            "level": "DEBUG",
            "filename": str(log_file),
            "maxBytes": max_bytes,
            "backupCount": rotation_count,
        }
        config["loggers"][LOGGER_NAME]["handlers"].append("file")

    logging.config.dictConfig(config)
    return logging.getLogger(LOGGER_NAME)


def get_logger(name: str | None = None) -> "logging.Logger":
    """Get the package logger, or a child of it when ``name`` is given."""
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)


@contextmanager
def debug_context(
    logger: "logging.Logger | None" = None,
) -> Generator["logging.Logger", None, None]:
    """Temporarily enable debug-level logging.

    Sets the logger and its handlers to DEBUG for the duration of the
    context, then restores the original levels.

    Args:
        logger: Optional logger to modify. Defaults to the package logger.

    Yields:
        The logger instance with DEBUG level enabled.

    Example:
        >>> with debug_context():
        ...     registry.start("render")
    """
    target_logger = logger or get_logger()
    original_level = target_logger.level
    original_handler_levels = []
    try:
        target_logger.setLevel(logging.DEBUG)
        for handler in target_logger.handlers:
            original_handler_levels.append(handler.level)
            handler.setLevel(logging.DEBUG)
        yield target_logger
    finally:
        target_logger.setLevel(original_level)
        for handler, level in zip(
            target_logger.handlers, original_handler_levels, strict=False
        ):
            handler.setLevel(level)


__all__ = [
    "LOGGER_NAME",
    "JSONFormatter",
    "setup_logging",
    "get_logger",
    "debug_context",
]
