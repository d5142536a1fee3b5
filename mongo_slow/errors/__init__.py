"""
Errors package - exception types and the error handling facade.

Usage:
    from mongo_slow.errors import get_error_handler, ErrorCategory, ErrorSeverity

    handler = get_error_handler()
    handler.handle_error(exception, ErrorCategory.DATABASE, ErrorSeverity.HIGH)
"""

from .exceptions import (
    ConfigurationError,
    MongoSlowError,
    ParseError,
    SnapshotFetchError,
)
from .facade import (
    ErrorCategory,
    ErrorSeverity,
    get_error_handler,
    reset_error_handler,
    resolve_error_handler,
)

__all__ = [
    "get_error_handler",
    "reset_error_handler",
    "resolve_error_handler",
    "ErrorCategory",
    "ErrorSeverity",
    "MongoSlowError",
    "ConfigurationError",
    "ParseError",
    "SnapshotFetchError",
]
