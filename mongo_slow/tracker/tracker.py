"""Operation-tracking state machine.

Each tick the tracker reconciles the latest ``currentOp`` snapshot against
what it saw on the previous tick:

- operations still running emit the growth of their elapsed time to the
  counter sink (milliseconds), skipping growth below the noise floor;
- operations that disappeared are treated as completed: their last elapsed
  time goes to the histogram sink (seconds) when above the observation
  floor, and slow ones outside excluded namespaces land in the history ring.

``reconcile`` must be called from one thread at a time. Readers use
:attr:`Tracker.view`, an immutable snapshot swapped in after every tick, and
never touch the working dicts.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from mongo_slow.config.settings import TrackerSettings
from mongo_slow.errors.exceptions import ParseError
from mongo_slow.interfaces.metrics_protocol import CounterSink, HistogramSink
from mongo_slow.tracker.history import HistoryRing
from mongo_slow.tracker.record import OperationRecord, parse

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TrackerView:
    """Published state, safe to read from request handlers."""
    records: tuple[OperationRecord, ...] = ()
    tick: int = 0
    updated_at: float | None = None


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    seen: int = 0
    parsed: int = 0
    parse_failures: int = 0
    emitted: int = 0
    completed: int = 0
    observed: int = 0
    history_appended: int = 0


class Tracker:
    def __init__(
        self,
        counter: CounterSink,
        histogram: HistogramSink,
        settings: TrackerSettings | None = None,
        history: HistoryRing | None = None,
    ) -> None:
        self.settings = settings or TrackerSettings()
        self.counter = counter
        self.histogram = histogram
        self.history = history if history is not None else HistoryRing(self.settings.history_capacity)
        self._last_seen_micros: dict[int, int] = {}
        self._live_records: dict[int, OperationRecord] = {}
        self._view = TrackerView()

    @property
    def view(self) -> TrackerView:
        return self._view

    def running(self) -> list[OperationRecord]:
        return list(self._view.records)

    def reconcile(self, snapshot: Sequence[Mapping[str, Any]], now: float | None = None) -> ReconcileResult:
        now = time.time() if now is None else now
        present: set[int] = set()
        parsed = failures = emitted = 0

        for raw in snapshot:
            try:
                record = parse(raw, observed_at=now)
            except ParseError as e:
                failures += 1
                logger.debug("failed to parse operation (field=%s): %s", e.field, e)
                continue
            parsed += 1

            last = self._last_seen_micros.get(record.opid)
            if last is None:
                delta = record.running_micros
                logger.debug("new operation started opid=%s user=%s op=%s",
                             record.opid, record.effective_user, record.op)
            else:
                # not clamped: a negative delta is passed to the sink as-is
                delta = record.running_micros - last
                logger.info(
                    "operation still running opid=%s user=%s op=%s last_micros=%s micros=%s delta=%s",
                    record.opid, record.effective_user, record.op, last, record.running_micros, delta,
                )
            record = record.with_delta(delta)

            if delta >= self.settings.noise_floor_micros:
                self.counter.add(delta / 1000, record.labels)
                emitted += 1

            self._last_seen_micros[record.opid] = record.running_micros
            self._live_records[record.opid] = record
            present.add(record.opid)

        completed = observed = appended = 0
        for opid in [o for o in self._last_seen_micros if o not in present]:
            record = self._live_records.pop(opid)
            del self._last_seen_micros[opid]
            completed += 1
            logger.debug("operation no longer running opid=%s micros=%s", opid, record.running_micros)

            if record.running_micros > self.settings.observe_floor_micros:
                self.histogram.observe(record.running_micros / 1_000_000, record.labels)
                observed += 1
            if (record.running_micros > self.settings.history_threshold_micros
                    and record.ns not in self.settings.excluded_namespaces):
                self.history.append(record)
                appended += 1

        self._view = TrackerView(
            records=tuple(self._live_records.values()),
            tick=self._view.tick + 1,
            updated_at=now,
        )
        return ReconcileResult(
            seen=len(snapshot),
            parsed=parsed,
            parse_failures=failures,
            emitted=emitted,
            completed=completed,
            observed=observed,
            history_appended=appended,
        )


__all__ = ["Tracker", "TrackerView", "ReconcileResult"]
