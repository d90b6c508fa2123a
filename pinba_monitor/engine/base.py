"""Base classes and interfaces for measurement engines."""

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import Any

_handle_ids = itertools.count(1)


class TimerHandle:
    """Opaque token for one measurement span.

    Handles are created by an engine and owned by whoever requested them
    until the timer is stopped-and-flushed or deleted. They cannot be
    copied; compare them by identity.
    """

    __slots__ = ("_id", "__weakref__")

    def __init__(self) -> None:
        self._id = next(_handle_ids)

    @property
    def id(self) -> int:
        return self._id

    def __copy__(self) -> "TimerHandle":
        raise TypeError("TimerHandle cannot be copied")

    def __deepcopy__(self, memo: dict) -> "TimerHandle":
        raise TypeError("TimerHandle cannot be copied")

    def __reduce__(self) -> Any:
        raise TypeError("TimerHandle cannot be pickled")

    def __repr__(self) -> str:
        return f"<TimerHandle #{self._id}>"


class FlushFlag(IntFlag):
    """Options for ``Engine.flush``."""

    NONE = 0
    ONLY_STOPPED_TIMERS = 1  # running timers survive the flush
    RESET_DATA = 2  # reset request start time and script name


class TimerFilter(IntEnum):
    """Selection for ``Engine.timers_get``."""

    ALL = 0
    ONLY_STOPPED = 1
    ONLY_RUNNING = 2


@dataclass
class TimerInfo:
    """Snapshot of a single timer.

    Attributes:
        value: Measured seconds; elapsed-so-far for a running timer.
        tags: Tag set the timer was started with (after merges).
        started: True while the timer is running.
        data: Arbitrary caller payload, or None.
    """

    value: float
    tags: dict[str, str] = field(default_factory=dict)
    started: bool = False
    data: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "tags": dict(self.tags),
            "started": self.started,
            "data": dict(self.data) if self.data is not None else None,
        }


@dataclass
class RequestInfo:
    """Request-level counters plus the timers collected so far."""

    mem_peak_usage: int = 0
    req_time: float = 0.0
    ru_utime: float = 0.0
    ru_stime: float = 0.0
    req_count: int = 0
    doc_size: int = 0
    server_name: str = ""
    script_name: str = ""
    hostname: str = ""
    schema: str = ""
    timers: list[TimerInfo] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "mem_peak_usage": self.mem_peak_usage,
            "req_time": self.req_time,
            "ru_utime": self.ru_utime,
            "ru_stime": self.ru_stime,
            "req_count": self.req_count,
            "doc_size": self.doc_size,
            "server_name": self.server_name,
            "script_name": self.script_name,
            "hostname": self.hostname,
            "schema": self.schema,
            "timers": [timer.to_dict() for timer in self.timers],
        }


class Engine(ABC):
    """Procedural call surface of a profiling engine.

    Failures are reported as ``False`` or empty results, never raised:
    stopping an already-stopped timer, or touching a retired handle, is
    an ordinary outcome for callers to inspect.
    """

    @abstractmethod
    def timer_start(self, tags: dict[str, str]) -> TimerHandle:
        """Create and start a timer."""
        pass

    @abstractmethod
    def timer_add(self, tags: dict[str, str], value: float) -> TimerHandle:
        """Create an already-stopped timer holding ``value`` seconds."""
        pass

    @abstractmethod
    def timer_stop(self, handle: TimerHandle) -> bool:
        """Stop a running timer; False if it was already stopped or is unknown."""
        pass

    @abstractmethod
    def timers_stop_all(self) -> bool:
        """Stop every running timer."""
        pass

    @abstractmethod
    def timer_delete(self, handle: TimerHandle) -> bool:
        """Discard a timer without reporting it."""
        pass

    @abstractmethod
    def timer_get_info(self, handle: TimerHandle) -> dict[str, Any]:
        """Return ``{value, tags, started, data}`` or an empty dict."""
        pass

    @abstractmethod
    def timers_get(self, selection: TimerFilter = TimerFilter.ALL) -> list[dict[str, Any]]:
        """Return info dicts of live timers."""
        pass

    @abstractmethod
    def timer_tags_merge(self, handle: TimerHandle, tags: dict[str, str]) -> bool:
        pass

    @abstractmethod
    def timer_tags_replace(self, handle: TimerHandle, tags: dict[str, str]) -> bool:
        pass

    @abstractmethod
    def timer_data_merge(self, handle: TimerHandle, data: dict[str, Any]) -> bool:
        pass

    @abstractmethod
    def timer_data_replace(self, handle: TimerHandle, data: dict[str, Any]) -> bool:
        pass

    @abstractmethod
    def get_info(self) -> dict[str, Any]:
        """Return request info as a dict (see ``RequestInfo``)."""
        pass

    @abstractmethod
    def set_script_name(self, name: str) -> None:
        pass

    @abstractmethod
    def set_server_name(self, name: str) -> None:
        pass

    @abstractmethod
    def set_host_name(self, name: str) -> None:
        pass

    @abstractmethod
    def set_schema(self, schema: str) -> None:
        pass

    @abstractmethod
    def set_request_time(self, seconds: float) -> None:
        pass

    @abstractmethod
    def set_doc_size(self, size: int) -> None:
        """Set the response size in bytes reported with the request."""
        pass

    @abstractmethod
    def flush(self, script_name: str | None = None, flags: int = 0) -> None:
        """Report the collected request data and retire flushed timers."""
        pass
