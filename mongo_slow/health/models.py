"""Health data models shared by the dependency registry and the HTTP layer."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum, IntEnum
from typing import Any


class HealthLevel(IntEnum):
    """Ordered severity; higher is worse."""
    HEALTHY = 0
    DEGRADED = 1
    WARNING = 2
    CRITICAL = 3
    UNKNOWN = 4


class HealthState(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    WARNING = "warning"
    CRITICAL = "critical"
    UNKNOWN = "unknown"


_STATE_LEVELS = {
    "healthy": HealthLevel.HEALTHY,
    "ok": HealthLevel.HEALTHY,
    "ready": HealthLevel.HEALTHY,
    "degraded": HealthLevel.DEGRADED,
    "warning": HealthLevel.WARNING,
    "warn": HealthLevel.WARNING,
    "critical": HealthLevel.CRITICAL,
    "unhealthy": HealthLevel.CRITICAL,
    "error": HealthLevel.CRITICAL,
    "failed": HealthLevel.CRITICAL,
}

_LEVEL_STATES = {
    HealthLevel.HEALTHY: HealthState.HEALTHY,
    HealthLevel.DEGRADED: HealthState.DEGRADED,
    HealthLevel.WARNING: HealthState.WARNING,
    HealthLevel.CRITICAL: HealthState.CRITICAL,
    HealthLevel.UNKNOWN: HealthState.UNKNOWN,
}


def level_from_state(state: str | HealthState) -> HealthLevel:
    """Map a free-form status string to a level; anything unrecognised is UNKNOWN."""
    key = state.value if isinstance(state, HealthState) else str(state)
    return _STATE_LEVELS.get(key.strip().lower(), HealthLevel.UNKNOWN)


def state_from_level(level: HealthLevel) -> HealthState:
    return _LEVEL_STATES[level]


@dataclass
class CheckHealth:
    name: str
    status: str = "unknown"
    message: str = ""
    last_check: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def level(self) -> HealthLevel:
        return level_from_state(self.status)


@dataclass
class HealthResponse:
    timestamp: str
    status: str
    level: HealthLevel
    checks: dict[str, CheckHealth] | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"timestamp": self.timestamp, "status": self.status, "level": int(self.level)}
        if self.checks is not None:
            out["checks"] = {k: asdict(v) for k, v in self.checks.items()}
        return out


__all__ = [
    "HealthLevel",
    "HealthState",
    "CheckHealth",
    "HealthResponse",
    "level_from_state",
    "state_from_level",
]
