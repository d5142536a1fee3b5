"""Operation records parsed from ``currentOp`` entries.

This is the only place untyped snapshot data is turned into typed values.
Everything downstream works with :class:`OperationRecord`.
"""
from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from bson import json_util

from mongo_slow.errors.exceptions import ParseError


@dataclass(frozen=True, slots=True)
class OperationRecord:
    opid: int
    effective_user: str
    running_micros: int
    op: str
    ns: str
    delta_micros: int = 0
    command: str = ''
    observed_at: float | None = None
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def labels(self) -> dict[str, str]:
        return {"user": self.effective_user, "operation": self.op, "namespace": self.ns}

    def with_delta(self, delta_micros: int) -> OperationRecord:
        return replace(self, delta_micros=delta_micros)

    def to_dict(self, include_raw: bool = True) -> dict[str, Any]:
        out: dict[str, Any] = {
            "opid": self.opid,
            "effective_user": self.effective_user,
            "running_micros": self.running_micros,
            "delta_micros": self.delta_micros,
            "op": self.op,
            "ns": self.ns,
            "command": self.command,
            "observed_at": self.observed_at,
        }
        if include_raw:
            out["raw"] = _json_safe(self.raw)
        return out


def trim_random_suffix(user: str) -> str:
    """Drop the randomized ``-<suffix>`` some account names carry.

    ``auto-default-abc123`` -> ``auto-default``; names without a hyphen are
    returned unchanged.
    """
    head, sep, _ = user.rpartition('-')
    return head if sep else user


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _require(raw: Mapping[str, Any], key: str, kind: str) -> Any:
    if key not in raw:
        raise ParseError(key)
    value = raw[key]
    ok = _is_int(value) if kind == 'int' else isinstance(value, str)
    if not ok:
        raise ParseError(key, f"{key} has type {type(value).__name__}, expected {kind}")
    return value


def _effective_user(raw: Mapping[str, Any]) -> str:
    users = raw.get('effectiveUsers')
    if users is None:
        raise ParseError('effectiveUsers', "missing effective user field")
    if not isinstance(users, (list, tuple)) or not users:
        raise ParseError('effectiveUsers', "effectiveUsers is empty or not a list")
    first = users[0]
    if not isinstance(first, Mapping) or not isinstance(first.get('user'), str):
        raise ParseError('effectiveUsers', "effectiveUsers[0].user missing or not a string")
    return trim_random_suffix(first['user'])


def _serialize_command(raw: Mapping[str, Any]) -> str:
    if 'command' not in raw:
        return ''
    try:
        return json_util.dumps(raw['command'])
    except (TypeError, ValueError, OverflowError):
        return ''


def _json_safe(raw: Mapping[str, Any]) -> Any:
    # BSON types (ObjectId, Timestamp, datetime) become extended JSON
    try:
        return json.loads(json_util.dumps(raw, json_options=json_util.RELAXED_JSON_OPTIONS))
    except (TypeError, ValueError, OverflowError):
        return None


def parse(raw: Mapping[str, Any], observed_at: float | None = None) -> OperationRecord:
    """Validate one ``currentOp`` entry and extract an :class:`OperationRecord`.

    Raises:
        ParseError: a required field is missing or has the wrong type. The
            error's ``field`` attribute names it.
    """
    if not isinstance(raw, Mapping):
        raise ParseError('entry', f"entry has type {type(raw).__name__}, expected mapping")

    opid = _require(raw, 'opid', 'int')
    running = _require(raw, 'microsecs_running', 'int')
    op = _require(raw, 'op', 'str')
    ns = _require(raw, 'ns', 'str')
    user = _effective_user(raw)

    return OperationRecord(
        opid=int(opid),
        effective_user=user,
        running_micros=int(running),
        op=op,
        ns=ns,
        command=_serialize_command(raw),
        observed_at=observed_at,
        raw=raw,
    )


__all__ = ["OperationRecord", "parse", "trim_random_suffix"]
