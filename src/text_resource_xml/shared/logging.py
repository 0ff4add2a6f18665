"""Structured logging utilities for text resource processing.

This module provides a correlation-aware logger that both emits standard
``logging`` records and keeps the diagnostics it reported, so that read and
write calls can hand them back to the caller.
"""

import logging
from typing import Any, Dict, List, Optional

from .result import DiagnosticEntry, DiagnosticSeverity

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Messages at or above this severity are kept as diagnostics
_RECORDED_SEVERITIES = (
    DiagnosticSeverity.WARNING,
    DiagnosticSeverity.ERROR,
    DiagnosticSeverity.CRITICAL,
)


class DiagnosticLogger:
    """Logger that includes correlation info and records reported problems."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize diagnostic logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name for structured logging
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]
        self._diagnostics: List[DiagnosticEntry] = []

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        if extra:
            combined_extra.update(extra)
        return combined_extra

    def _record(
        self,
        severity: DiagnosticSeverity,
        message: str,
        line: Optional[int],
        extra: Optional[Dict[str, Any]],
    ) -> None:
        if severity not in _RECORDED_SEVERITIES:
            return
        self._diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=self.component,
                position={"line": line} if line is not None else None,
                details=dict(extra) if extra else None,
                correlation_id=self.correlation_id,
            )
        )

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message with correlation info."""
        self.logger.debug(message, extra=self._get_extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log info message with correlation info."""
        self.logger.info(message, extra=self._get_extra(extra))

    def warning(
        self,
        message: str,
        line: Optional[int] = None,
        extra: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log and record a warning."""
        self.logger.warning(message, extra=self._get_extra(extra))
        self._record(DiagnosticSeverity.WARNING, message, line, extra)

    def error(
        self,
        message: str,
        line: Optional[int] = None,
        extra: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log and record an error.

        Args:
            message: Human readable description of the problem
            line: Source line the problem was found at, if known
            extra: Additional structured data for the log record
        """
        self.logger.error(message, extra=self._get_extra(extra))
        self._record(DiagnosticSeverity.ERROR, message, line, extra)

    @property
    def diagnostics(self) -> List[DiagnosticEntry]:
        """All recorded diagnostics, oldest first."""
        return list(self._diagnostics)

    @property
    def errors(self) -> List[DiagnosticEntry]:
        return [
            entry for entry in self._diagnostics
            if entry.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
        ]

    @property
    def first_error(self) -> Optional[str]:
        errors = self.errors
        return errors[0].message if errors else None

    def clear(self) -> None:
        """Forget recorded diagnostics."""
        self._diagnostics.clear()


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> DiagnosticLogger:
    """Get a diagnostic logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        DiagnosticLogger instance
    """
    return DiagnosticLogger(name, correlation_id, component)


def configure_logging(level: str = "WARNING", fmt: str = DEFAULT_LOG_FORMAT) -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(level=getattr(logging, level.upper()), format=fmt)
