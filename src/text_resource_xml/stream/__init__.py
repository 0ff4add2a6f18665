"""Byte devices and the pull-based XML event stream.

This module provides the input/output layer consumed by the document reader
and writer.
"""

from .device import BufferDevice, Device, FileDevice, OpenMode, StreamDevice
from .events import EventType, StreamError, XmlEvent, XmlEventReader

__all__ = [
    "BufferDevice",
    "Device",
    "FileDevice",
    "OpenMode",
    "StreamDevice",
    "EventType",
    "StreamError",
    "XmlEvent",
    "XmlEventReader",
]
