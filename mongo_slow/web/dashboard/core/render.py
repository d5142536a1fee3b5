"""Projections of tracker state into response payloads."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from fastapi.templating import Jinja2Templates

from mongo_slow.tracker.record import OperationRecord
from .config import TEMPLATES_DIR

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def records_payload(records: Iterable[OperationRecord], include_raw: bool = True) -> list[dict[str, Any]]:
    return [r.to_dict(include_raw=include_raw) for r in records]


def table_rows(records: Iterable[OperationRecord]) -> list[dict[str, Any]]:
    """Rows for the HTML table, longest running first."""
    rows = []
    for r in sorted(records, key=lambda rec: rec.running_micros, reverse=True):
        rows.append({
            "opid": r.opid,
            "user": r.effective_user,
            "op": r.op,
            "ns": r.ns,
            "running_seconds": round(r.running_micros / 1_000_000, 3),
            "delta_ms": round(r.delta_micros / 1000, 1),
            "command": r.command,
        })
    return rows
