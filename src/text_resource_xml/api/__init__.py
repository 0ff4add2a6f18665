"""Public API: read/write functions, the configured class and adapters."""

from .adapters import ConversionResult, DataFrameAdapter
from .functions import (
    TextResourceXml,
    read,
    read_file,
    read_string,
    write,
    write_file,
    write_string,
)

__all__ = [
    "ConversionResult",
    "DataFrameAdapter",
    "TextResourceXml",
    "read",
    "read_file",
    "read_string",
    "write",
    "write_file",
    "write_string",
]
