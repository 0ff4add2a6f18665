"""Integration adapters for text resources.

Provides bidirectional conversion between :class:`TextResource` and a pandas
DataFrame with one row per string, which is the shape translators usually
exchange as CSV or spreadsheets.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from text_resource_xml.model import TextGroup, TextResource
from text_resource_xml.shared import DiagnosticEntry, DiagnosticSeverity, get_logger

GROUP_ID_COLUMN = "group_id"
STRING_ID_COLUMN = "string_id"
TEXT_COLUMN = "text"
COLUMNS = [GROUP_ID_COLUMN, STRING_ID_COLUMN, TEXT_COLUMN]


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    version: str
    target_library: str
    supported_versions: List[str]
    description: str


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


class DataFrameAdapter:
    """Adapter for bidirectional conversion with pandas DataFrame.

    Columns are ``group_id``, ``string_id`` and ``text``; the resource name and
    flag travel in ``DataFrame.attrs``.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="pandas",
            version="1.0.0",
            target_library="pandas",
            supported_versions=["1.0+"],
            description="Bidirectional conversion between TextResource and pandas DataFrame",
        )

    def is_available(self) -> bool:
        """Check if pandas is available."""
        try:
            import pandas  # noqa: F401
        except ImportError:
            return False
        return True

    def to_target(self, resource: TextResource) -> ConversionResult:
        """Convert a TextResource to a DataFrame."""
        start_time = time.time()
        import pandas as pd

        rows = [
            {GROUP_ID_COLUMN: group.id, STRING_ID_COLUMN: index, TEXT_COLUMN: text}
            for group in resource.groups
            for index, text in enumerate(group.strings)
        ]
        df = pd.DataFrame(rows, columns=COLUMNS)
        df.attrs["name"] = resource.name
        df.attrs["index_with_counts"] = resource.index_with_counts

        return ConversionResult(
            success=True,
            converted_data=df,
            original_data=resource,
            conversion_time_ms=(time.time() - start_time) * 1000,
            metadata={
                "row_count": len(df),
                "group_count": len(resource.groups),
                "columns": list(df.columns),
            },
        )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert a DataFrame back to a TextResource.

        Groups are created in order of first appearance. Within a group the
        ``string_id`` values must run 0, 1, 2, ... in row order.
        """
        start_time = time.time()
        import pandas as pd

        if not isinstance(target_data, pd.DataFrame):
            return self._error_result("Target data is not a pandas DataFrame", target_data, start_time)
        missing = [column for column in COLUMNS if column not in target_data.columns]
        if missing:
            return self._error_result(
                f"DataFrame is missing columns: {', '.join(missing)}", target_data, start_time
            )

        resource = TextResource(
            name=str(target_data.attrs.get("name", "")),
            index_with_counts=bool(target_data.attrs.get("index_with_counts", True)),
        )
        groups: Dict[int, TextGroup] = {}
        for row in target_data.itertuples(index=False):
            row_data = row._asdict()
            try:
                group_id = int(row_data[GROUP_ID_COLUMN])
                string_id = int(row_data[STRING_ID_COLUMN])
            except (TypeError, ValueError):
                return self._error_result(
                    f"Non-integer id in row: {row_data[GROUP_ID_COLUMN]!r}, "
                    f"{row_data[STRING_ID_COLUMN]!r}",
                    target_data,
                    start_time,
                )
            group = groups.get(group_id)
            if group is None:
                group = groups[group_id] = TextGroup(group_id)
                resource.add_group(group)
            if string_id != len(group):
                return self._error_result(
                    f"Strings in group {group_id} are not ordered properly",
                    target_data,
                    start_time,
                )
            text = row_data[TEXT_COLUMN]
            group.add("" if pd.isna(text) else str(text))

        return ConversionResult(
            success=True,
            converted_data=resource,
            original_data=target_data,
            conversion_time_ms=(time.time() - start_time) * 1000,
            metadata={"row_count": len(target_data), "group_count": len(resource.groups)},
        )

    def _error_result(self, message: str, original: Any, start_time: float) -> ConversionResult:
        self._logger.error(message)
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original,
            conversion_time_ms=(time.time() - start_time) * 1000,
            errors=[message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id,
                )
            ],
        )
