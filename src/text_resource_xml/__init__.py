"""Text Resource XML.

Reads and writes localization string tables stored as ``<strings>`` XML
documents: numbered groups of strings indexed from zero.

Progressive API Disclosure:
- Level 1: Simple functions - read(), read_string(), read_file(), write(),
  write_string(), write_file()
- Level 2: Configured reader/writer - TextResourceXml class
- Level 3: Document reader/writer over explicit devices - DocumentReader,
  DocumentWriter
"""

__version__ = "0.1.0"
__author__ = "Text Resource XML Team"

# Level 1 and 2
from .api import (
    TextResourceXml,
    read,
    read_file,
    read_string,
    write,
    write_file,
    write_string,
)

# Level 3
from .document import DocumentReader, DocumentWriter

# Model, configuration and results
from .model import TextGroup, TextResource
from .shared import ReadResult, WriteResult, XmlStreamConfig
from .stream import BufferDevice, FileDevice

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "read",
    "read_string",
    "read_file",
    "write",
    "write_string",
    "write_file",

    # Level 2: Configured reader/writer
    "TextResourceXml",

    # Level 3: Document reader/writer and devices
    "DocumentReader",
    "DocumentWriter",
    "BufferDevice",
    "FileDevice",

    # Model, configuration and results
    "TextGroup",
    "TextResource",
    "ReadResult",
    "WriteResult",
    "XmlStreamConfig",
]
