"""Enable/disable gate in front of the measurement engine.

Every call is forwarded to the engine only while monitoring is enabled.
When disabled, calls return the same shapes with neutral values (``None``
handles, ``True`` for boolean results, empty dicts and lists), so calling
code keeps its control flow without doing any measurement.

Example usage:
    gate = MetricsGate.from_config(load_config())

    handle = gate.timer_start({"group": "db", "op": "select"})
    run_query()
    gate.timer_stop(handle)

    gate.set_script_name("/orders").flush()
"""

from collections.abc import Mapping
from typing import Any

from .config import MonitoringConfig
from .engine import Engine, LocalEngine, TimerFilter, TimerHandle
from .monitoring_logging import get_logger
from .tags import HOSTNAME_TAG, SERVER_NAME_TAG, Tags, merge_tags, validate_tags

logger = get_logger("gate")


class MetricsGate:
    """Process-level switch and forwarding layer for an Engine.

    Attributes:
        engine: The engine calls are forwarded to.
        defaults_override_tags: Let default tags replace same-named caller tags.
    """

    def __init__(
        self,
        engine: Engine,
        enabled: bool = False,
        defaults_override_tags: bool = False,
    ):
        self.engine = engine
        self.defaults_override_tags = defaults_override_tags
        self._enabled = bool(enabled)
        self._default_tags: Tags | None = None

    @classmethod
    def from_config(
        cls, config: MonitoringConfig, engine: Engine | None = None
    ) -> "MetricsGate":
        """Build a gate whose flag is read once from ``config``.

        Args:
            config: Loaded monitoring configuration.
            engine: Engine to forward to; defaults to a LocalEngine seeded
                with the configured request identity.
        """
        if engine is None:
            engine = LocalEngine(
                hostname=config.hostname,
                server_name=config.server_name,
                script_name=config.script_name,
                schema=config.request_schema,
            )
        logger.debug(f"Monitoring {'enabled' if config.enabled else 'disabled'}")
        return cls(
            engine,
            enabled=config.enabled,
            defaults_override_tags=config.defaults_override_tags,
        )

    def is_enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> "MetricsGate":
        """Override the enablement flag (tests, manual control)."""
        self._enabled = bool(enabled)
        return self

    # Default tags

    def get_default_tags(self) -> Tags:
        """Return the process default tags, fetching them from the engine once.

        The engine's reported hostname and server name become
        ``__hostname`` and ``__server_name``; empty values are left out.
        """
        if not self._enabled:
            return {}
        if self._default_tags is None:
            info = self.engine.get_info()
            defaults: Tags = {}
            if info.get("hostname"):
                defaults[HOSTNAME_TAG] = str(info["hostname"])
            if info.get("server_name"):
                defaults[SERVER_NAME_TAG] = str(info["server_name"])
            self._default_tags = defaults
        return dict(self._default_tags)

    def _tags(self, tags: Mapping[str, Any] | None) -> Tags:
        return merge_tags(
            tags, self.get_default_tags(), defaults_override=self.defaults_override_tags
        )

    # Timers

    def timer_start(self, tags: Mapping[str, Any] | None = None) -> TimerHandle | None:
        """Start a timer; returns None when monitoring is disabled."""
        if not self._enabled:
            return None
        return self.engine.timer_start(self._tags(tags))

    def timer_add(
        self, tags: Mapping[str, Any] | None = None, value: float = 0.0
    ) -> TimerHandle | None:
        """Record an already-measured timer of ``value`` seconds."""
        if not self._enabled:
            return None
        return self.engine.timer_add(self._tags(tags), value)

    def timer_stop(self, handle: TimerHandle) -> bool:
        if not self._enabled:
            return True
        stopped = self.engine.timer_stop(handle)
        if not stopped:
            logger.warning(f"Engine did not stop {handle!r} (already stopped?)")
        return stopped

    def timers_stop_all(self) -> bool:
        if not self._enabled:
            return True
        return self.engine.timers_stop_all()

    def timer_delete(self, handle: TimerHandle) -> bool:
        if not self._enabled:
            return True
        deleted = self.engine.timer_delete(handle)
        if not deleted:
            logger.warning(f"Engine did not delete {handle!r}")
        return deleted

    def timer_get_info(self, handle: TimerHandle) -> dict[str, Any]:
        if not self._enabled:
            return {}
        return self.engine.timer_get_info(handle)

    def timers_get(self, selection: TimerFilter = TimerFilter.ALL) -> list[dict[str, Any]]:
        if not self._enabled:
            return []
        return self.engine.timers_get(selection)

    def timer_tags_merge(self, handle: TimerHandle, tags: Mapping[str, Any]) -> bool:
        if not self._enabled:
            return True
        return self.engine.timer_tags_merge(handle, validate_tags(tags))

    def timer_tags_replace(self, handle: TimerHandle, tags: Mapping[str, Any]) -> bool:
        if not self._enabled:
            return True
        return self.engine.timer_tags_replace(handle, validate_tags(tags))

    def timer_data_merge(self, handle: TimerHandle, data: Mapping[str, Any]) -> bool:
        if not self._enabled:
            return True
        return self.engine.timer_data_merge(handle, dict(data))

    def timer_data_replace(self, handle: TimerHandle, data: Mapping[str, Any]) -> bool:
        if not self._enabled:
            return True
        return self.engine.timer_data_replace(handle, dict(data))

    # Request

    def get_info(self) -> dict[str, Any]:
        if not self._enabled:
            return {}
        return self.engine.get_info()

    def set_script_name(self, name: str) -> "MetricsGate":
        if self._enabled:
            self.engine.set_script_name(name)
        return self

    def set_server_name(self, name: str) -> "MetricsGate":
        if self._enabled:
            self.engine.set_server_name(name)
        return self

    def set_host_name(self, name: str) -> "MetricsGate":
        if self._enabled:
            self.engine.set_host_name(name)
        return self

    def set_schema(self, schema: str) -> "MetricsGate":
        if self._enabled:
            self.engine.set_schema(schema)
        return self

    def set_request_time(self, seconds: float) -> "MetricsGate":
        if self._enabled:
            self.engine.set_request_time(seconds)
        return self

    def set_doc_size(self, size: int) -> "MetricsGate":
        if self._enabled:
            self.engine.set_doc_size(size)
        return self

    def flush(self, script_name: str | None = None, flags: int = 0) -> "MetricsGate":
        """Ask the engine to report collected data now."""
        if self._enabled:
            self.engine.flush(script_name, flags)
        return self


__all__ = ["MetricsGate"]
