"""Single-slot timer that manages its own registry key."""

import uuid
from collections.abc import Mapping
from typing import Any

from .errors import DuplicateKeyError, KeyNotFoundError
from .timers import NamedTimerRegistry


class SingleTimer:
    """One measurement at a time, without caller-chosen keys.

    Each ``start`` registers the timer under a fresh key in the shared
    registry; ``stop`` and ``delete`` release it so the timer can be
    started again. A start made while monitoring is disabled registers
    nothing; the following ``stop`` or ``delete`` is then a no-op.

    Example:
        timer = SingleTimer(timers)
        timer.start({"group": "cache"})
        warm_cache()
        timer.stop()
    """

    def __init__(self, registry: NamedTimerRegistry):
        self.registry = registry
        self.key: str | None = None
        self._started_disabled = False

    def start(self, tags: Mapping[str, Any] | None = None) -> "SingleTimer":
        """Start the timer.

        Raises:
            DuplicateKeyError: If this timer is already running.
        """
        if self.is_exists():
            raise DuplicateKeyError(self.key or "", "Another timer is already started")

        key = f"timer-{uuid.uuid4().hex}"
        self.registry.start(key, tags)
        if self.registry.is_exists(key):
            self.key = key
            self._started_disabled = False
        else:
            self.key = None
            self._started_disabled = True
        return self

    def stop(self) -> "SingleTimer":
        if self._release_disabled():
            return self
        self.registry.stop(self._require_key())
        self.key = None
        return self

    def delete(self) -> "SingleTimer":
        if self._release_disabled():
            return self
        self.registry.delete(self._require_key())
        self.key = None
        return self

    def info(self) -> dict[str, Any]:
        if self.key is None and self._started_disabled:
            return {}
        return self.registry.info(self._require_key())

    def is_exists(self) -> bool:
        return self.key is not None and self.registry.is_exists(self.key)

    def _release_disabled(self) -> bool:
        if self.key is None and self._started_disabled:
            self._started_disabled = False
            return True
        return False

    def _require_key(self) -> str:
        if self.key is None:
            raise KeyNotFoundError(None)
        return self.key


__all__ = ["SingleTimer"]
