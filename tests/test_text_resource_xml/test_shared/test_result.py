"""Tests for result objects and diagnostic types."""

import pytest

from text_resource_xml.model import TextResource
from text_resource_xml.shared.result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ReadResult,
    TagMatch,
    TagStatus,
    WriteResult,
)


def _entry(severity, message="problem", line=None):
    return DiagnosticEntry(
        severity=severity,
        message=message,
        component="test",
        position={"line": line} if line is not None else None,
    )


class TestDiagnosticEntry:
    """Test suite for DiagnosticEntry."""

    def test_line_from_position(self):
        """Test that line is taken from the position mapping."""
        assert _entry(DiagnosticSeverity.ERROR, line=7).line == 7
        assert _entry(DiagnosticSeverity.ERROR).line is None

    def test_empty_message_rejected(self):
        """Test validation of the message."""
        with pytest.raises(ValueError, match="message cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.ERROR, "", "test")

    def test_empty_component_rejected(self):
        """Test validation of the component."""
        with pytest.raises(ValueError, match="component cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.ERROR, "problem", "")


class TestTagMatch:
    """Test suite for TagMatch."""

    def test_found(self):
        match = TagMatch.found()
        assert match.status is TagStatus.FOUND
        assert match.is_found
        assert not match.failed
        assert match.message is None

    def test_not_found_is_not_an_error(self):
        """Test that not found carries neither success nor an error."""
        match = TagMatch.not_found()
        assert match.status is TagStatus.NOT_FOUND
        assert not match.is_found
        assert not match.failed
        assert match.message is None

    def test_error_carries_message(self):
        match = TagMatch.error("Invalid XML: unexpected end of file")
        assert match.status is TagStatus.ERROR
        assert match.failed
        assert not match.is_found
        assert match.message == "Invalid XML: unexpected end of file"

    def test_error_requires_message(self):
        with pytest.raises(ValueError, match="requires a message"):
            TagMatch.error("")

    def test_immutable(self):
        match = TagMatch.found()
        with pytest.raises(AttributeError):
            match.status = TagStatus.ERROR  # type: ignore[misc]


class TestReadResult:
    """Test suite for ReadResult."""

    def test_errors_filter_by_severity(self):
        """Test that only error-level diagnostics count as errors."""
        result = ReadResult(
            success=False,
            resource=TextResource(),
            diagnostics=[
                _entry(DiagnosticSeverity.WARNING, "careful"),
                _entry(DiagnosticSeverity.ERROR, "first"),
                _entry(DiagnosticSeverity.CRITICAL, "second"),
            ],
        )
        assert [entry.message for entry in result.errors] == ["first", "second"]
        assert result.error == "first"

    def test_no_error(self):
        result = ReadResult(success=True, resource=TextResource())
        assert result.errors == []
        assert result.error is None


class TestWriteResult:
    """Test suite for WriteResult."""

    def test_text_decodes_data(self):
        result = WriteResult(success=True, data="<strings/>".encode("utf-16"), encoding="UTF-16")
        assert result.text == "<strings/>"

    def test_text_without_data(self):
        result = WriteResult(success=False)
        assert result.text is None
        assert result.error is None
