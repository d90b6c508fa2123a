"""
Shared fixtures for the pinba_monitor test suite.

Provides test fixtures for:
- An in-process engine collecting flushed requests
- A call-count spy around that engine
- Enabled/disabled gates and registries
- Environment isolation for configuration tests
"""

import logging
from unittest.mock import MagicMock

import pytest

from pinba_monitor.config.config_loader import ENV_VARS
from pinba_monitor.engine import Engine, LocalEngine, RequestInfo
from pinba_monitor.gate import MetricsGate
from pinba_monitor.monitoring_logging import LOGGER_NAME
from pinba_monitor.timers import NamedTimerRegistry

TEST_HOSTNAME = "test-host"
TEST_SERVER_NAME = "test-server"


@pytest.fixture()
def flushed() -> list[RequestInfo]:
    """Requests handed to the engine sink."""
    return []


@pytest.fixture()
def engine(flushed) -> LocalEngine:
    """Local engine with a fixed identity and a collecting sink."""
    return LocalEngine(
        hostname=TEST_HOSTNAME,
        server_name=TEST_SERVER_NAME,
        sink=flushed.append,
    )


@pytest.fixture()
def spy_engine(engine) -> MagicMock:
    """Spy that forwards every call to the local engine and records it."""
    return MagicMock(spec=Engine, wraps=engine)


@pytest.fixture()
def gate(spy_engine) -> MetricsGate:
    """Enabled gate over the spy engine."""
    return MetricsGate(spy_engine, enabled=True)


@pytest.fixture()
def disabled_gate(spy_engine) -> MetricsGate:
    """Disabled gate over the spy engine."""
    return MetricsGate(spy_engine, enabled=False)


@pytest.fixture()
def registry(gate) -> NamedTimerRegistry:
    """Registry on the enabled gate."""
    return NamedTimerRegistry(gate)


@pytest.fixture()
def clean_env(monkeypatch):
    """Remove monitoring environment variables for the test."""
    for var in ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers added by setup_logging so tests do not share streams."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
