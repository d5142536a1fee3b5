"""
Error Handler Protocol - Interface for error handling and routing.

Lets the poller, the snapshot source and the web layer depend on error
routing without importing the concrete handler.
"""

from enum import Enum
from typing import Any, Protocol, runtime_checkable


class ErrorCategory(Enum):
    """Error categories for classification."""
    DATABASE = "database"
    DATA_PARSING = "data_parsing"
    DATA_VALIDATION = "data_validation"
    NETWORK = "network"
    RESOURCE = "resource"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@runtime_checkable
class ErrorHandlerProtocol(Protocol):
    """
    Protocol for error handling and routing.

    Usage:
        def poll(error_handler: ErrorHandlerProtocol) -> None:
            try:
                ...
            except SnapshotFetchError as e:
                error_handler.handle_error(
                    e,
                    category=ErrorCategory.DATABASE,
                    severity=ErrorSeverity.HIGH,
                    component="orchestrator.poller",
                )
    """

    def handle_error(
        self,
        error: Exception,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        component: str | None = None,
        function_name: str | None = None,
        message: str | None = None,
        context: dict[str, Any] | None = None,
        should_log: bool = True,
        suppress: bool = True,
    ) -> None:
        """
        Handle an error with categorization and routing.

        Args:
            error: The exception to handle
            category: Error category for classification
            severity: Error severity level
            component: Dotted component name the error came from
            function_name: Function or route that raised
            message: Human readable summary
            context: Optional context dict
            should_log: Emit a log line for this error
            suppress: Whether to suppress re-raising (default True)
        """
        ...

    def log_error(
        self,
        message: str,
        category: ErrorCategory,
        severity: ErrorSeverity,
        context: dict[str, Any] | None = None
    ) -> None:
        """Log an error message without an exception."""
        ...

    def get_error_count(self, category: ErrorCategory | None = None) -> int:
        """Get count of errors handled, optionally for one category."""
        ...


__all__ = ["ErrorHandlerProtocol", "ErrorCategory", "ErrorSeverity"]
