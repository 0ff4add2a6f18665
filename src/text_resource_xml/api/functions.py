"""Public API for reading and writing text resource XML.

Level 1 is a set of module-level functions (``read``, ``read_string``,
``read_file``, ``write``, ``write_string``, ``write_file``). Level 2 is the
:class:`TextResourceXml` class, which keeps a configuration and usage
statistics across calls.
"""

import re
import time
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, Union

from text_resource_xml.document import DocumentReader, DocumentWriter
from text_resource_xml.model import TextResource
from text_resource_xml.shared import (
    ReadResult,
    WriteResult,
    XmlStreamConfig,
    get_logger,
)
from text_resource_xml.stream import BufferDevice, Device, FileDevice, StreamDevice

InputType = Union[Device, Path, bytes, str, BinaryIO]
OutputType = Union[Device, Path, BinaryIO]

MS_PER_SECOND = 1000

_DECLARED_ENCODING = re.compile(
    r"""\s*<\?xml[^>]*?encoding\s*=\s*["']([A-Za-z0-9._-]+)["']"""
)


def _encode_document(xml: str) -> bytes:
    """Encode XML text with the encoding its declaration names.

    If that encoding is unknown or cannot represent the text, the declaration
    is rewritten to UTF-8 and the text is encoded as UTF-8.
    """
    match = _DECLARED_ENCODING.match(xml)
    if match is None:
        return xml.encode("utf-8")
    try:
        return xml.encode(match.group(1))
    except (LookupError, UnicodeEncodeError):
        xml = xml[:match.start(1)] + "UTF-8" + xml[match.end(1):]
    return xml.encode("utf-8")


def _input_device(source: InputType) -> Device:
    if isinstance(source, Device):
        return source
    if isinstance(source, Path):
        return FileDevice(source)
    if isinstance(source, bytes):
        return BufferDevice(source)
    if isinstance(source, str):
        return BufferDevice(_encode_document(source))
    if hasattr(source, "read"):
        return StreamDevice(source)
    raise TypeError(f"Unsupported input type: {type(source).__name__}")


def _output_device(target: OutputType) -> Device:
    if isinstance(target, Device):
        return target
    if isinstance(target, Path):
        return FileDevice(target)
    if isinstance(target, str):
        # read() takes str as XML content, so a str target is ambiguous
        raise TypeError("Unsupported output type: str; use a Path or write_file()")
    if hasattr(target, "write"):
        return StreamDevice(target)
    raise TypeError(f"Unsupported output type: {type(target).__name__}")


def _read_device(
    device: Device,
    config: XmlStreamConfig,
    correlation_id: Optional[str],
    resource: Optional[TextResource],
) -> ReadResult:
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "document_reader")
    if resource is None:
        resource = TextResource()

    success = DocumentReader(config.reader, logger).read(device, resource)

    processing_time = (time.time() - start_time) * MS_PER_SECOND
    logger.info(
        "Read completed",
        extra={
            "success": success,
            "source": device.description,
            "group_count": len(resource.groups),
            "processing_time_ms": processing_time,
        },
    )
    return ReadResult(
        success=success,
        resource=resource,
        diagnostics=logger.diagnostics,
        source=device.description,
        processing_time_ms=processing_time,
        correlation_id=correlation_id,
    )


def _write_device(
    resource: TextResource,
    device: Device,
    config: XmlStreamConfig,
    correlation_id: Optional[str],
) -> WriteResult:
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "document_writer")

    success = DocumentWriter(config.writer, logger).write(resource, device)

    processing_time = (time.time() - start_time) * MS_PER_SECOND
    logger.info(
        "Write completed",
        extra={
            "success": success,
            "target": device.description,
            "processing_time_ms": processing_time,
        },
    )
    return WriteResult(
        success=success,
        diagnostics=logger.diagnostics,
        target=device.description,
        data=device.data if success and isinstance(device, BufferDevice) else None,
        encoding=config.writer.encoding,
        processing_time_ms=processing_time,
        correlation_id=correlation_id,
    )


def read(
    source: InputType,
    config: Optional[XmlStreamConfig] = None,
    correlation_id: Optional[str] = None,
    resource: Optional[TextResource] = None,
) -> ReadResult:
    """Read a text resource from a device, path, bytes, XML string or binary file.

    Args:
        source: Where to read from; a ``str`` is XML content, use a ``Path``
            or :func:`read_file` for file names
        config: Configuration (defaults to ``XmlStreamConfig()``)
        correlation_id: Optional correlation ID for request tracking
        resource: Resource to populate; a new one is created if omitted

    Returns:
        ReadResult holding the resource and any reported errors

    Examples:
        >>> result = read('<strings><group id="1"><string id="0">A</string></group></strings>')
        >>> result.success
        True
        >>> result.resource.groups[0].strings
        ['A']
    """
    return _read_device(
        _input_device(source), config or XmlStreamConfig(), correlation_id, resource
    )


def read_string(
    xml: Union[str, bytes],
    config: Optional[XmlStreamConfig] = None,
    correlation_id: Optional[str] = None,
) -> ReadResult:
    """Read a text resource from XML content."""
    data = xml if isinstance(xml, bytes) else _encode_document(xml)
    return _read_device(BufferDevice(data), config or XmlStreamConfig(), correlation_id, None)


def read_file(
    path: Union[str, Path],
    config: Optional[XmlStreamConfig] = None,
    correlation_id: Optional[str] = None,
) -> ReadResult:
    """Read a text resource from a file.

    A file that cannot be opened gives an unsuccessful result, not an exception.
    """
    return _read_device(FileDevice(path), config or XmlStreamConfig(), correlation_id, None)


def write(
    resource: TextResource,
    target: OutputType,
    config: Optional[XmlStreamConfig] = None,
    correlation_id: Optional[str] = None,
) -> WriteResult:
    """Write a text resource to a device, ``Path`` or binary file object.

    A plain ``str`` target is rejected with ``TypeError`` because :func:`read`
    treats ``str`` as XML content; use a ``Path`` or :func:`write_file`.
    """
    return _write_device(
        resource, _output_device(target), config or XmlStreamConfig(), correlation_id
    )


def write_string(
    resource: TextResource,
    config: Optional[XmlStreamConfig] = None,
    correlation_id: Optional[str] = None,
) -> WriteResult:
    """Write a text resource to memory; the document is in ``result.text``.

    Examples:
        >>> result = write_string(TextResource(name="demo"))
        >>> 'name="demo"' in result.text
        True
    """
    return _write_device(resource, BufferDevice(), config or XmlStreamConfig(), correlation_id)


def write_file(
    resource: TextResource,
    path: Union[str, Path],
    config: Optional[XmlStreamConfig] = None,
    correlation_id: Optional[str] = None,
) -> WriteResult:
    """Write a text resource to a file."""
    return _write_device(resource, FileDevice(path), config or XmlStreamConfig(), correlation_id)


class TextResourceXml:
    """Configured, reusable reader/writer.

    Attributes:
        config: Current configuration
        correlation_id: Correlation ID for request tracking

    Examples:
        >>> io = TextResourceXml(XmlStreamConfig.strict())
        >>> result = io.read(Path("strings.xml"))
        >>> io.write(result.resource, Path("copy.xml")).success
        True
    """

    def __init__(
        self,
        config: Optional[XmlStreamConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or XmlStreamConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "text_resource_xml")

        self._read_count = 0
        self._successful_reads = 0
        self._write_count = 0
        self._successful_writes = 0
        self._total_processing_time = 0.0

    def read(
        self,
        source: InputType,
        resource: Optional[TextResource] = None,
    ) -> ReadResult:
        """Read a text resource; see :func:`read`."""
        result = _read_device(_input_device(source), self.config, self.correlation_id, resource)
        self._read_count += 1
        self._successful_reads += int(result.success)
        self._total_processing_time += result.processing_time_ms
        return result

    def write(self, resource: TextResource, target: Optional[OutputType] = None) -> WriteResult:
        """Write a text resource; without a target the document is kept in memory."""
        device = BufferDevice() if target is None else _output_device(target)
        result = _write_device(resource, device, self.config, self.correlation_id)
        self._write_count += 1
        self._successful_writes += int(result.success)
        self._total_processing_time += result.processing_time_ms
        return result

    def reconfigure(self, config: XmlStreamConfig) -> None:
        """Use ``config`` for subsequent calls."""
        self.config = config
        self.logger.info("Reconfigured", extra={"config_name": config.name})

    @property
    def statistics(self) -> Dict[str, Any]:
        """Usage statistics since creation or the last reset."""
        operations = self._read_count + self._write_count
        return {
            "total_reads": self._read_count,
            "successful_reads": self._successful_reads,
            "total_writes": self._write_count,
            "successful_writes": self._successful_writes,
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / operations if operations > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        self._read_count = 0
        self._successful_reads = 0
        self._write_count = 0
        self._successful_writes = 0
        self._total_processing_time = 0.0
