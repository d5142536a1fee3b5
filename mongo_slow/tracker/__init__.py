"""Operation tracking core: record parsing, reconcile state machine, history ring."""

from .history import HistoryRing
from .record import OperationRecord, parse, trim_random_suffix
from .tracker import ReconcileResult, Tracker, TrackerView

__all__ = [
    "HistoryRing",
    "OperationRecord",
    "ReconcileResult",
    "Tracker",
    "TrackerView",
    "parse",
    "trim_random_suffix",
]
