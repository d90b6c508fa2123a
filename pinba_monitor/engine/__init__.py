"""Measurement engines behind the monitoring facade."""

from .base import Engine, FlushFlag, RequestInfo, TimerFilter, TimerHandle, TimerInfo
from .local import LocalEngine, RequestSink, log_sink

__all__ = [
    "Engine",
    "FlushFlag",
    "RequestInfo",
    "TimerFilter",
    "TimerHandle",
    "TimerInfo",
    "LocalEngine",
    "RequestSink",
    "log_sink",
]
