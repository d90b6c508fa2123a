"""In-process measurement engine.

Keeps the timer table in memory and hands each flushed request snapshot
to a sink callable. No wire protocol is involved: the default sink writes
the snapshot to the package logger.
"""

import socket
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from threading import Lock
from typing import Any

import psutil

from ..monitoring_logging import get_logger
from .base import Engine, FlushFlag, RequestInfo, TimerFilter, TimerHandle, TimerInfo

logger = get_logger("engine")

RequestSink = Callable[[RequestInfo], None]


def log_sink(request: RequestInfo) -> None:
    """Default sink: log the flushed request at DEBUG level."""
    logger.debug(
        f"Flushed request {request.script_name or '<unnamed>'}: "
        f"{len(request.timers)} timers, {request.req_time * 1000:.2f}ms",
        extra={"operation": "flush", "request": request.to_dict()},
    )


@dataclass
class _TimerRecord:
    tags: dict[str, str]
    started_at: float = 0.0
    value: float = 0.0
    started: bool = False
    data: dict[str, Any] | None = None

    def elapsed(self, now: float) -> float:
        if self.started:
            return now - self.started_at
        return self.value

    def snapshot(self, now: float) -> TimerInfo:
        return TimerInfo(
            value=self.elapsed(now),
            tags=dict(self.tags),
            started=self.started,
            data=dict(self.data) if self.data is not None else None,
        )


@dataclass
class _RequestState:
    started_at: float = field(default_factory=time.perf_counter)
    cpu_user: float = 0.0
    cpu_system: float = 0.0
    script_name: str = ""
    request_time: float | None = None
    doc_size: int = 0


class LocalEngine(Engine):
    """Engine that records timers in the current process.

    Thread-safe: the timer table is guarded by a lock.

    Example:
        engine = LocalEngine(server_name="api", sink=collected.append)
        handle = engine.timer_start({"group": "db"})
        engine.timer_stop(handle)
        engine.flush("/orders")
    """

    def __init__(
        self,
        hostname: str | None = None,
        server_name: str = "",
        script_name: str = "",
        schema: str = "",
        sink: RequestSink | None = None,
    ):
        self.hostname = hostname or socket.gethostname()
        self.server_name = server_name
        self.schema = schema
        self.sink = sink or log_sink
        self.last_flush: RequestInfo | None = None
        self._timers: dict[TimerHandle, _TimerRecord] = {}
        self._lock = Lock()
        self._process = psutil.Process()
        self._mem_peak = 0
        self._req_count = 0
        self._request = self._new_request(script_name)

    def _new_request(self, script_name: str = "") -> _RequestState:
        cpu = self._process.cpu_times()
        return _RequestState(
            cpu_user=cpu.user, cpu_system=cpu.system, script_name=script_name
        )

    # Timers

    def timer_start(self, tags: dict[str, str]) -> TimerHandle:
        handle = TimerHandle()
        record = _TimerRecord(
            tags=dict(tags), started_at=time.perf_counter(), started=True
        )
        with self._lock:
            self._timers[handle] = record
        return handle

    def timer_add(self, tags: dict[str, str], value: float) -> TimerHandle:
        handle = TimerHandle()
        with self._lock:
            self._timers[handle] = _TimerRecord(tags=dict(tags), value=float(value))
        return handle

    def timer_stop(self, handle: TimerHandle) -> bool:
        now = time.perf_counter()
        with self._lock:
            record = self._timers.get(handle)
            if record is None or not record.started:
                return False
            record.value = now - record.started_at
            record.started = False
        return True

    def timers_stop_all(self) -> bool:
        now = time.perf_counter()
        with self._lock:
            self._stop_running(now)
        return True

    def _stop_running(self, now: float) -> None:
        for record in self._timers.values():
            if record.started:
                record.value = now - record.started_at
                record.started = False

    def timer_delete(self, handle: TimerHandle) -> bool:
        with self._lock:
            return self._timers.pop(handle, None) is not None

    def timer_get_info(self, handle: TimerHandle) -> dict[str, Any]:
        now = time.perf_counter()
        with self._lock:
            record = self._timers.get(handle)
            if record is None:
                return {}
            return record.snapshot(now).to_dict()

    def timers_get(self, selection: TimerFilter = TimerFilter.ALL) -> list[dict[str, Any]]:
        now = time.perf_counter()
        with self._lock:
            records = list(self._timers.values())
        if selection == TimerFilter.ONLY_STOPPED:
            records = [r for r in records if not r.started]
        elif selection == TimerFilter.ONLY_RUNNING:
            records = [r for r in records if r.started]
        return [r.snapshot(now).to_dict() for r in records]

    def _update(self, handle: TimerHandle, apply: Callable[[_TimerRecord], None]) -> bool:
        with self._lock:
            record = self._timers.get(handle)
            if record is None:
                return False
            apply(record)
        return True

    def timer_tags_merge(self, handle: TimerHandle, tags: dict[str, str]) -> bool:
        return self._update(handle, lambda r: r.tags.update(tags))

    def timer_tags_replace(self, handle: TimerHandle, tags: dict[str, str]) -> bool:
        return self._update(handle, lambda r: setattr(r, "tags", dict(tags)))

    def timer_data_merge(self, handle: TimerHandle, data: dict[str, Any]) -> bool:
        def apply(record: _TimerRecord) -> None:
            record.data = {**(record.data or {}), **data}

        return self._update(handle, apply)

    def timer_data_replace(self, handle: TimerHandle, data: dict[str, Any]) -> bool:
        return self._update(handle, lambda r: setattr(r, "data", dict(data)))

    # Request info

    def _request_info(
        self, timers: list[TimerInfo], script_name: str | None, now: float
    ) -> RequestInfo:
        # Caller holds self._lock
        cpu = self._process.cpu_times()
        self._mem_peak = max(self._mem_peak, self._process.memory_info().rss)
        request = self._request
        req_time = (
            request.request_time
            if request.request_time is not None
            else now - request.started_at
        )
        return RequestInfo(
            mem_peak_usage=self._mem_peak,
            req_time=req_time,
            ru_utime=max(cpu.user - request.cpu_user, 0.0),
            ru_stime=max(cpu.system - request.cpu_system, 0.0),
            req_count=self._req_count,
            doc_size=request.doc_size,
            server_name=self.server_name,
            script_name=script_name or request.script_name,
            hostname=self.hostname,
            schema=self.schema,
            timers=timers,
        )

    def get_info(self) -> dict[str, Any]:
        now = time.perf_counter()
        with self._lock:
            timers = [r.snapshot(now) for r in self._timers.values()]
            request = self._request_info(timers, None, now)
        return request.to_dict()

    def set_script_name(self, name: str) -> None:
        with self._lock:
            self._request.script_name = name

    def set_server_name(self, name: str) -> None:
        with self._lock:
            self.server_name = name

    def set_host_name(self, name: str) -> None:
        with self._lock:
            self.hostname = name

    def set_schema(self, schema: str) -> None:
        with self._lock:
            self.schema = schema

    def set_request_time(self, seconds: float) -> None:
        with self._lock:
            self._request.request_time = float(seconds)

    def set_doc_size(self, size: int) -> None:
        with self._lock:
            self._request.doc_size = int(size)

    def flush(self, script_name: str | None = None, flags: int = 0) -> None:
        """Send stopped timers to the sink and retire their handles.

        Unless ``FlushFlag.ONLY_STOPPED_TIMERS`` is given, running timers are
        stopped first and flushed with the rest.
        """
        flags = FlushFlag(flags)
        now = time.perf_counter()
        with self._lock:
            if not flags & FlushFlag.ONLY_STOPPED_TIMERS:
                self._stop_running(now)
            flushed = [h for h, r in self._timers.items() if not r.started]
            timers = [self._timers.pop(h).snapshot(now) for h in flushed]
            self._req_count += 1
            request = self._request_info(timers, script_name, now)
            self.last_flush = request
            if flags & FlushFlag.RESET_DATA:
                self._request = self._new_request()

        self.sink(request)


__all__ = ["LocalEngine", "RequestSink", "log_sink"]
