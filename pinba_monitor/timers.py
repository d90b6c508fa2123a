"""Named timer registry.

Lets callers start and stop timers by a string key instead of holding the
engine handle themselves. A key maps to at most one live timer.

Example usage:
    timers = NamedTimerRegistry(gate)

    timers.start("render", {"template": "cart"})
    render()
    timers.stop("render")

    with timers.measure("db.select", {"table": "orders"}):
        run_query()
"""

import time
from collections.abc import Generator, Mapping
from contextlib import contextmanager
from threading import Lock
from typing import Any

from .engine import TimerHandle
from .errors import DuplicateKeyError, KeyNotFoundError
from .gate import MetricsGate
from .monitoring_logging import get_logger

logger = get_logger("timers")


class NamedTimerRegistry:
    """Key to timer-handle mapping on top of a MetricsGate.

    Thread-safe: the mapping is guarded by a lock.

    When the gate is disabled ``start`` stores nothing and never raises,
    so a later ``stop`` of that key raises KeyNotFoundError. Timers started
    while enabled can still be stopped or deleted after the gate is
    disabled; those calls no longer reach the engine. Starting such a key
    again while disabled leaves the live entry in place.
    """

    def __init__(self, gate: MetricsGate):
        self.gate = gate
        self._timers: dict[str, TimerHandle] = {}
        self._lock = Lock()

    def add(self, tags: Mapping[str, Any] | None = None, value: float = 0.0) -> "NamedTimerRegistry":
        """Record an already-measured timer; nothing is stored under a key.

        Args:
            tags: Tags in the form ``{"tag": "value"}``; names cannot be numeric.
            value: Measured duration in seconds.
        """
        self.gate.timer_add(tags, value)
        return self

    def start(self, key: str, tags: Mapping[str, Any] | None = None) -> "NamedTimerRegistry":
        """Start a timer under ``key``.

        Args:
            key: Registry key; it is not sent to the engine.
            tags: Tags in the form ``{"tag": "value"}``; names cannot be numeric.

        Raises:
            DuplicateKeyError: If a timer is already started under ``key``
                and the gate is enabled.
        """
        with self._lock:
            if key in self._timers:
                if self.gate.is_enabled():
                    raise DuplicateKeyError(key)
            else:
                handle = self.gate.timer_start(tags)
                if handle is not None:
                    self._timers[key] = handle
        logger.debug(
            f"Started timer {key}",
            extra={"operation": "start", "timer_key": key, "tags": dict(tags or {})},
        )
        return self

    def stop(self, key: str) -> "NamedTimerRegistry":
        """Stop the timer under ``key`` and forget it.

        Raises:
            KeyNotFoundError: If no timer is registered under ``key``.
        """
        handle = self._pop(key)
        self.gate.timer_stop(handle)
        logger.debug(f"Stopped timer {key}", extra={"operation": "stop", "timer_key": key})
        return self

    def delete(self, key: str) -> "NamedTimerRegistry":
        """Discard the timer under ``key`` without reporting it.

        Raises:
            KeyNotFoundError: If no timer is registered under ``key``.
        """
        handle = self._pop(key)
        self.gate.timer_delete(handle)
        logger.debug(f"Deleted timer {key}", extra={"operation": "delete", "timer_key": key})
        return self

    def info(self, key: str) -> dict[str, Any]:
        """Return ``{value, tags, started, data}`` for the timer under ``key``.

        Raises:
            KeyNotFoundError: If no timer is registered under ``key``.
        """
        with self._lock:
            handle = self._get(key)
        return self.gate.timer_get_info(handle)

    def is_exists(self, key: str) -> bool:
        with self._lock:
            return key in self._timers

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._timers)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._timers

    def __len__(self) -> int:
        with self._lock:
            return len(self._timers)

    @contextmanager
    def measure(
        self, key: str, tags: Mapping[str, Any] | None = None
    ) -> Generator["NamedTimerRegistry", None, None]:
        """Time a block under ``key``; the timer is stopped even on errors.

        Example:
            with timers.measure("embed", {"provider": "local"}):
                embed(texts)
        """
        self.start(key, tags)
        start = time.perf_counter()
        try:
            yield self
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            if self.is_exists(key):
                self.stop(key)
            logger.debug(
                f"[PERF] {key}: {duration_ms:.2f}ms",
                extra={"operation": "measure", "timer_key": key, "duration_ms": duration_ms},
            )

    def _get(self, key: str) -> TimerHandle:
        if key not in self._timers:
            raise KeyNotFoundError(key)
        return self._timers[key]

    def _pop(self, key: str) -> TimerHandle:
        with self._lock:
            handle = self._get(key)
            del self._timers[key]
        return handle


__all__ = ["NamedTimerRegistry"]
