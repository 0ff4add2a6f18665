"""Document reader and writer for the ``<strings>`` schema."""

from .reader import DocumentReader, parse_int
from .writer import DocumentWriter

__all__ = [
    "DocumentReader",
    "DocumentWriter",
    "parse_int",
]
