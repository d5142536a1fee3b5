"""
Interfaces package.

Protocol definitions shared across the exporter. Protocols only import
typing and the stdlib so any module can depend on them without pulling in
pymongo or prometheus_client.

Usage:
    from mongo_slow.interfaces import CounterSink, HistogramSink

    def emit(counter: CounterSink) -> None:
        counter.add(12.5, {"user": "app", "operation": "query", "namespace": "db.c"})
"""

from .error_handler_protocol import ErrorCategory, ErrorHandlerProtocol, ErrorSeverity
from .metrics_protocol import CounterLike, CounterSink, GaugeLike, HistogramLike, HistogramSink
from .snapshot_protocol import SnapshotSource

__all__ = [
    "CounterSink",
    "HistogramSink",
    "CounterLike",
    "GaugeLike",
    "HistogramLike",
    "SnapshotSource",
    "ErrorHandlerProtocol",
    "ErrorCategory",
    "ErrorSeverity",
]
