"""Fixed-capacity ring of recently completed slow operations."""
from __future__ import annotations

from mongo_slow.tracker.record import OperationRecord


class HistoryRing:
    """Overwrite-oldest buffer with a single writer.

    ``append`` runs on the polling thread only. ``snapshot`` may run on any
    thread; it copies the slot list and can return a view that is one append
    behind, which is acceptable for diagnostics.
    """

    def __init__(self, capacity: int = 1000) -> None:
        if capacity < 1:
            raise ValueError(f"history capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._slots: list[OperationRecord | None] = [None] * capacity
        self._next = 0
        self._written = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return min(self._written, self._capacity)

    def append(self, record: OperationRecord) -> None:
        self._slots[self._next] = record
        self._next = (self._next + 1) % self._capacity
        self._written += 1

    def snapshot(self) -> list[OperationRecord]:
        """Populated slots, oldest first."""
        slots = list(self._slots)
        start = self._next
        ordered = slots[start:] + slots[:start]
        return [r for r in ordered if r is not None]


__all__ = ["HistoryRing"]
