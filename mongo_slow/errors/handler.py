"""Concrete error handler: severity-mapped logging plus per-category counts."""
from __future__ import annotations

import logging
import threading
from collections import Counter
from typing import Any

from mongo_slow.interfaces.error_handler_protocol import ErrorCategory, ErrorSeverity

logger = logging.getLogger("mongo_slow.errors")

_LEVELS = {
    ErrorSeverity.LOW: logging.DEBUG,
    ErrorSeverity.MEDIUM: logging.WARNING,
    ErrorSeverity.HIGH: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


class ErrorHandler:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: Counter[ErrorCategory] = Counter()

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
        with self._lock:
            self._counts[category] += 1
        if should_log:
            logger.log(
                _LEVELS.get(severity, logging.WARNING),
                "%s: %s (category=%s component=%s function=%s context=%s)",
                message or type(error).__name__,
                error,
                category.value,
                component,
                function_name,
                context or {},
                exc_info=severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL),
            )
        if not suppress:
            raise error

    def log_error(
        self,
        message: str,
        category: ErrorCategory,
        severity: ErrorSeverity,
        context: dict[str, Any] | None = None,
    ) -> None:
        with self._lock:
            self._counts[category] += 1
        logger.log(_LEVELS.get(severity, logging.WARNING), "%s (category=%s context=%s)",
                   message, category.value, context or {})

    def get_error_count(self, category: ErrorCategory | None = None) -> int:
        with self._lock:
            if category is None:
                return sum(self._counts.values())
            return self._counts[category]

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return {cat.value: n for cat, n in self._counts.items()}


__all__ = ["ErrorHandler"]
