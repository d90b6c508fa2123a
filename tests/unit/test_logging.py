"""Unit tests for logging setup."""

import json
import logging
from pathlib import Path


from pinba_monitor.monitoring_logging import (
    JSONFormatter,
    debug_context,
    get_logger,
    setup_logging,
)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_file_logging(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "monitor.log"
        logger = setup_logging(log_file=log_file)

        logger.info("Test message")

        assert log_file.exists()
        assert "Test message" in log_file.read_text()

    def test_json_file_format(self, tmp_path: Path) -> None:
        log_file = tmp_path / "json.log"
        logger = setup_logging(log_file=log_file, log_format="json")

        logger.info("Timer stopped", extra={"timer_key": "render", "duration_ms": 12.5})

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["message"] == "Timer stopped"
        assert entry["timer_key"] == "render"
        assert entry["duration_ms"] == 12.5
        assert entry["level"] == "INFO"

    def test_quiet_console_level(self) -> None:
        logger = setup_logging(quiet=True)
        console = logger.handlers[0]
        assert console.level == logging.ERROR

    def test_verbose_console_level(self) -> None:
        logger = setup_logging(verbose=True)
        assert logger.handlers[0].level == logging.DEBUG

    def test_child_loggers_share_handlers(self, tmp_path: Path) -> None:
        log_file = tmp_path / "child.log"
        setup_logging(log_file=log_file)
        get_logger("timers").debug("from child")
        assert "from child" in log_file.read_text()


class TestJSONFormatter:
    def test_exception_and_tags(self) -> None:
        formatter = JSONFormatter()
        try:
            raise ValueError("bad")
        except ValueError:
            import sys

            record = logging.LogRecord(
                "pinba_monitor", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )
        record.tags = {"group": "db"}

        entry = json.loads(formatter.format(record))
        assert entry["tags"] == {"group": "db"}
        assert "ValueError: bad" in entry["exception"]
        assert "duration_ms" not in entry


class TestGetLogger:
    def test_names(self) -> None:
        assert get_logger().name == "pinba_monitor"
        assert get_logger("gate").name == "pinba_monitor.gate"


class TestDebugContext:
    def test_restores_levels(self) -> None:
        logger = setup_logging(level="WARNING")
        original = logger.level
        handler_levels = [h.level for h in logger.handlers]

        with debug_context() as debug_logger:
            assert debug_logger is logger
            assert logger.level == logging.DEBUG
            assert all(h.level == logging.DEBUG for h in logger.handlers)

        assert logger.level == original
        assert [h.level for h in logger.handlers] == handler_levels
