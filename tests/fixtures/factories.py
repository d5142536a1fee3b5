"""Factory functions for test data.

Build ``currentOp`` entries, records and settings with sensible defaults so
tests only spell out what they care about.
"""
from mongo_slow.config.settings import MongoSettings, ServerSettings, Settings, TrackerSettings
from mongo_slow.tracker.record import OperationRecord


def make_raw_op(opid=1, micros=0, user="reporting", op="query", ns="app.orders", command=None, **extra):
    """Create a raw ``currentOp`` entry.

    Args:
        opid: Operation id
        micros: ``microsecs_running``
        user: First effective user name (``None`` leaves ``effectiveUsers`` out)
        op: Operation type
        ns: Namespace
        command: Command document, omitted when None
        **extra: Additional or overriding fields
    """
    raw = {
        "opid": opid,
        "microsecs_running": micros,
        "op": op,
        "ns": ns,
    }
    if user is not None:
        raw["effectiveUsers"] = [{"user": user, "db": "admin"}]
    if command is not None:
        raw["command"] = command
    raw.update(extra)
    return raw


def make_record(opid=1, micros=0, user="reporting", op="query", ns="app.orders", delta=0, command=""):
    return OperationRecord(
        opid=opid,
        effective_user=user,
        running_micros=micros,
        op=op,
        ns=ns,
        delta_micros=delta,
        command=command,
    )


def make_settings(poll_interval=60.0, health_interval=15.0, history_capacity=1000, **tracker):
    """Settings for a service under test; the poll interval is long so threads stay idle."""
    return Settings(
        server=ServerSettings(poll_interval=poll_interval, health_interval=health_interval),
        mongo=MongoSettings(uri="mongodb://localhost:27017"),
        tracker=TrackerSettings(history_capacity=history_capacity, **tracker),
    )
