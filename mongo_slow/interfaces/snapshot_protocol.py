"""
Snapshot source protocol - the pull feed of currently running operations.

``fetch()`` returns the raw, untyped entries for one tick or raises
``SnapshotFetchError``. Typing stops here: entries stay plain mappings until
the record parser validates them.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SnapshotSource(Protocol):
    def fetch(self) -> Sequence[Mapping[str, Any]]:
        ...

    def ping(self) -> dict[str, Any]:
        """Cheap liveness check used by the health registry."""
        ...


__all__ = ["SnapshotSource"]
