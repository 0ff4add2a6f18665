"""Result objects and diagnostic types for text resource reading and writing.

This module defines the tag search outcome used by the document reader and the
result objects returned by the public read/write API.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from text_resource_xml.model import TextResource


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()      # Terminal for the current read/write call
    CRITICAL = auto()


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    @property
    def line(self) -> Optional[int]:
        """Source line the entry refers to, if known."""
        if self.position is None:
            return None
        return self.position.get("line")


class TagStatus(Enum):
    """Outcome of searching the event stream for a tag."""

    FOUND = auto()
    NOT_FOUND = auto()  # No more of this tag here; not an error
    ERROR = auto()


@dataclass(frozen=True)
class TagMatch:
    """Result of a start or end tag search.

    ``NOT_FOUND`` never carries a message. ``ERROR`` always carries the
    message that was reported to the logger.
    """

    status: TagStatus
    message: Optional[str] = None

    @classmethod
    def found(cls) -> "TagMatch":
        return cls(TagStatus.FOUND)

    @classmethod
    def not_found(cls) -> "TagMatch":
        return cls(TagStatus.NOT_FOUND)

    @classmethod
    def error(cls, message: str) -> "TagMatch":
        if not message:
            raise ValueError("Tag search error requires a message")
        return cls(TagStatus.ERROR, message)

    @property
    def is_found(self) -> bool:
        return self.status is TagStatus.FOUND

    @property
    def failed(self) -> bool:
        return self.status is TagStatus.ERROR


def _errors_of(diagnostics: List[DiagnosticEntry]) -> List[DiagnosticEntry]:
    return [
        entry for entry in diagnostics
        if entry.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
    ]


@dataclass
class ReadResult:
    """Outcome of reading a text resource document."""

    success: bool
    resource: "TextResource"
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    source: Optional[str] = None
    processing_time_ms: float = 0.0
    correlation_id: Optional[str] = None

    @property
    def errors(self) -> List[DiagnosticEntry]:
        """Error-level diagnostics in the order they were reported."""
        return _errors_of(self.diagnostics)

    @property
    def error(self) -> Optional[str]:
        """Message of the first reported error, or None."""
        errors = self.errors
        return errors[0].message if errors else None


@dataclass
class WriteResult:
    """Outcome of writing a text resource document."""

    success: bool
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    target: Optional[str] = None
    data: Optional[bytes] = None
    encoding: str = "UTF-8"
    processing_time_ms: float = 0.0
    correlation_id: Optional[str] = None

    @property
    def errors(self) -> List[DiagnosticEntry]:
        return _errors_of(self.diagnostics)

    @property
    def error(self) -> Optional[str]:
        errors = self.errors
        return errors[0].message if errors else None

    @property
    def text(self) -> Optional[str]:
        """Written document decoded with the output encoding."""
        if self.data is None:
            return None
        return self.data.decode(self.encoding)
