"""Timer facade over a profiling engine.

This package provides:

- **gate**: `MetricsGate`, the enable/disable switch forwarding calls to
  an engine and injecting default tags
- **timers**: `NamedTimerRegistry`, start/stop timers by string key
- **timer**: `SingleTimer`, a one-slot timer with generated keys
- **engine**: the `Engine` call surface and the in-process `LocalEngine`
- **config**: `MonitoringConfig` and `load_config`

Example usage:

    from pinba_monitor import MetricsGate, NamedTimerRegistry, load_config

    gate = MetricsGate.from_config(load_config())
    timers = NamedTimerRegistry(gate)

    with timers.measure("db.select", {"table": "orders"}):
        run_query()

    gate.set_script_name("/orders").flush()
"""

__version__ = "1.0.0"

from .config import MonitoringConfig, load_config
from .engine import (
    Engine,
    FlushFlag,
    LocalEngine,
    RequestInfo,
    TimerFilter,
    TimerHandle,
    TimerInfo,
)
from .errors import (
    ConfigurationError,
    DuplicateKeyError,
    InvalidTagError,
    KeyNotFoundError,
    MonitoringError,
)
from .gate import MetricsGate
from .timer import SingleTimer
from .timers import NamedTimerRegistry

__all__ = [
    "__version__",
    # Facade
    "MetricsGate",
    "NamedTimerRegistry",
    "SingleTimer",
    # Engine
    "Engine",
    "LocalEngine",
    "TimerHandle",
    "TimerInfo",
    "RequestInfo",
    "FlushFlag",
    "TimerFilter",
    # Config
    "MonitoringConfig",
    "load_config",
    # Errors
    "MonitoringError",
    "DuplicateKeyError",
    "KeyNotFoundError",
    "InvalidTagError",
    "ConfigurationError",
]
