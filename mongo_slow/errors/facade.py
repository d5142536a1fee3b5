"""
Error Handler Facade - process-wide handler with lazy initialization.

Usage:
    from mongo_slow.errors import get_error_handler, ErrorCategory, ErrorSeverity

    try:
        ...
    except Exception as e:
        get_error_handler().handle_error(
            e,
            category=ErrorCategory.RESOURCE,
            severity=ErrorSeverity.LOW,
            component="web.dashboard.app",
            function_name="lifespan_stop",
            message="Failed to stop poller",
            should_log=False,
        )

Components that want isolation (tests, embedded use) accept an
``ErrorHandlerProtocol`` argument and only fall back to this singleton.
"""

import threading
from typing import TYPE_CHECKING

from mongo_slow.errors.handler import ErrorHandler
from mongo_slow.interfaces.error_handler_protocol import ErrorCategory, ErrorSeverity

if TYPE_CHECKING:
    from mongo_slow.interfaces import ErrorHandlerProtocol

# Singleton state
_error_handler_instance: "ErrorHandler | None" = None
_error_handler_lock = threading.Lock()


def get_error_handler() -> "ErrorHandler":
    """
    Get error handler singleton with lazy initialization.

    Thread-safe with double-checked locking.
    """
    global _error_handler_instance

    # Fast path: already initialized
    if _error_handler_instance is not None:
        return _error_handler_instance

    with _error_handler_lock:
        if _error_handler_instance is None:
            _error_handler_instance = ErrorHandler()
        return _error_handler_instance


def reset_error_handler() -> None:
    """Reset the singleton (for testing)."""
    global _error_handler_instance
    with _error_handler_lock:
        _error_handler_instance = None


def resolve_error_handler(handler: "ErrorHandlerProtocol | None") -> "ErrorHandlerProtocol":
    return handler if handler is not None else get_error_handler()


__all__ = [
    "get_error_handler",
    "reset_error_handler",
    "resolve_error_handler",
    "ErrorCategory",
    "ErrorSeverity",
]
