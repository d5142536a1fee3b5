"""Dependency health checks and models."""

from .models import (
    CheckHealth,
    HealthLevel,
    HealthResponse,
    HealthState,
    level_from_state,
    state_from_level,
)
from .registry import Dependency, HealthRegistry, HealthStats

__all__ = [
    "CheckHealth",
    "Dependency",
    "HealthLevel",
    "HealthRegistry",
    "HealthResponse",
    "HealthState",
    "HealthStats",
    "level_from_state",
    "state_from_level",
]
