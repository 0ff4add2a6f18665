"""Text resource model.

This module provides the groups-of-strings data structures shared by the
document reader and writer.
"""

from .resource import TextGroup, TextResource

__all__ = [
    "TextGroup",
    "TextResource",
]
