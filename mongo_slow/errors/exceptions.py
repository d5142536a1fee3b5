"""Exception types raised by the exporter."""
from __future__ import annotations


class MongoSlowError(Exception):
    """Base class for exporter errors."""


class ConfigurationError(MongoSlowError):
    """Start-up configuration is incomplete or invalid."""


class ParseError(MongoSlowError):
    """A raw currentOp entry is missing a required field or has the wrong type.

    Recoverable: the caller skips the entry and keeps processing the tick.
    """

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"missing {field}")


class SnapshotFetchError(MongoSlowError):
    """The currentOp snapshot could not be fetched or decoded.

    Fatal to the polling loop.
    """


__all__ = [
    "MongoSlowError",
    "ConfigurationError",
    "ParseError",
    "SnapshotFetchError",
]
