"""Shared utilities for text resource processing.

This module provides result types, diagnostics, configuration objects and the
logger used across the stream, document and api layers.
"""

from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ReadResult,
    TagMatch,
    TagStatus,
    WriteResult,
)
from .config import (
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    ReaderConfig,
    WriterConfig,
    XmlStreamConfig,
)
from .logging import (
    DiagnosticLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "ReadResult",
    "TagMatch",
    "TagStatus",
    "WriteResult",
    "ConfigError",
    "ConfigValidationError",
    "GlobalConfig",
    "ReaderConfig",
    "WriterConfig",
    "XmlStreamConfig",
    "DiagnosticLogger",
    "configure_logging",
    "get_logger",
]
