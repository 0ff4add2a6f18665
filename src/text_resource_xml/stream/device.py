"""Byte devices the document reader and writer operate on.

A device is opened explicitly, reports why it could not be opened through
``error_string`` and is closed by whoever opened it.
"""

import io
from abc import ABC, abstractmethod
from enum import Enum, auto
from pathlib import Path
from typing import BinaryIO, Optional, Union

PathType = Union[str, Path]


class OpenMode(Enum):
    """Device open modes."""

    READ_ONLY = auto()
    WRITE_ONLY = auto()


class Device(ABC):
    """Abstract readable/writable byte device."""

    def __init__(self) -> None:
        self._handle: Optional[BinaryIO] = None
        self._mode: Optional[OpenMode] = None
        self._error_string = ""

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    @property
    def mode(self) -> Optional[OpenMode]:
        return self._mode

    @property
    def error_string(self) -> str:
        """Reason for the last failed operation."""
        return self._error_string

    @property
    @abstractmethod
    def description(self) -> str:
        """Human readable name of the device, used in diagnostics."""

    @abstractmethod
    def _open_handle(self, mode: OpenMode) -> BinaryIO:
        """Return an open binary handle or raise OSError."""

    def open(self, mode: OpenMode) -> bool:
        """Open the device.

        Returns:
            False when the device cannot be opened; ``error_string`` then
            holds the reason.
        """
        if self.is_open:
            self._error_string = "Device is already open"
            return False
        try:
            self._handle = self._open_handle(mode)
        except OSError as e:
            self._error_string = e.strerror or str(e)
            return False
        self._mode = mode
        self._error_string = ""
        return True

    def close(self) -> None:
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        self._release_handle(handle)
        self._mode = None

    def _release_handle(self, handle: BinaryIO) -> None:
        handle.close()

    def read(self, size: int = -1) -> bytes:
        if self._handle is None or self._mode is not OpenMode.READ_ONLY:
            raise ValueError(f"{self.description} is not open for reading")
        return self._handle.read(size)

    def write(self, data: bytes) -> int:
        if self._handle is None or self._mode is not OpenMode.WRITE_ONLY:
            raise ValueError(f"{self.description} is not open for writing")
        return self._handle.write(data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.description!r})"


class FileDevice(Device):
    """A file on the local filesystem."""

    def __init__(self, path: PathType) -> None:
        super().__init__()
        self.path = Path(path)

    @property
    def description(self) -> str:
        return str(self.path)

    def _open_handle(self, mode: OpenMode) -> BinaryIO:
        return open(self.path, "rb" if mode is OpenMode.READ_ONLY else "wb")


class BufferDevice(Device):
    """In-memory bytes; written bytes replace ``data`` when the device closes."""

    def __init__(self, data: bytes = b"") -> None:
        super().__init__()
        self._data = bytes(data)

    @property
    def description(self) -> str:
        return "<memory>"

    @property
    def data(self) -> bytes:
        if self._handle is not None and self._mode is OpenMode.WRITE_ONLY:
            return self._handle.getvalue()  # type: ignore[attr-defined]
        return self._data

    def _open_handle(self, mode: OpenMode) -> BinaryIO:
        if mode is OpenMode.READ_ONLY:
            return io.BytesIO(self._data)
        return io.BytesIO()

    def _release_handle(self, handle: BinaryIO) -> None:
        if self._mode is OpenMode.WRITE_ONLY:
            self._data = handle.getvalue()  # type: ignore[attr-defined]
        handle.close()


class StreamDevice(Device):
    """Wraps a caller-owned binary file object.

    Closing the device does not close the wrapped object.
    """

    def __init__(self, stream: BinaryIO, description: Optional[str] = None) -> None:
        super().__init__()
        self.stream = stream
        self._description = description or getattr(stream, "name", None) or "<stream>"

    @property
    def description(self) -> str:
        return str(self._description)

    def _open_handle(self, mode: OpenMode) -> BinaryIO:
        if getattr(self.stream, "closed", False):
            raise OSError("Stream is closed")
        if mode is OpenMode.READ_ONLY and not self.stream.readable():
            raise OSError("Stream is not readable")
        if mode is OpenMode.WRITE_ONLY and not self.stream.writable():
            raise OSError("Stream is not writable")
        return self.stream

    def _release_handle(self, handle: BinaryIO) -> None:
        if self._mode is OpenMode.WRITE_ONLY:
            handle.flush()
