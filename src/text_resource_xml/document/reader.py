"""Document reader for text resource XML.

Walks the event stream looking for exactly the tags the schema allows at each
point and fills a :class:`TextResource` while checking:

- the root element is ``<strings>``
- every ``<group>`` and ``<string>`` has an integer ``id``
- string ids inside a group run 0, 1, 2, ... in document order
- every ``<group>`` and the root are closed

The first problem is reported to the logger and ends the read. Groups that
were completed before that point stay in the resource.
"""

import re
from typing import Any, Optional

from text_resource_xml.model import TextGroup, TextResource
from text_resource_xml.shared import (
    DiagnosticLogger,
    ReaderConfig,
    TagMatch,
    get_logger,
)
from text_resource_xml.stream import (
    Device,
    EventType,
    OpenMode,
    StreamError,
    XmlEventReader,
)

ROOT_TAG = "strings"
GROUP_TAG = "group"
STRING_TAG = "string"

NAME_ATTRIBUTE = "name"
INDEX_WITH_COUNTS_ATTRIBUTE = "indexWithCounts"
ID_ATTRIBUTE = "id"

# Signed 32-bit decimal, surrounding whitespace allowed
_INTEGER_PATTERN = re.compile(r"\s*[+-]?[0-9]+\s*")
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1

# Events that may appear between the tags the reader looks for
SKIPPED_EVENTS = frozenset({
    EventType.NO_TOKEN,
    EventType.START_DOCUMENT,
    EventType.COMMENT,
    EventType.DTD,
    EventType.CHARACTERS,
    EventType.ENTITY_REFERENCE,
    EventType.PROCESSING_INSTRUCTION,
})


def parse_int(value: Optional[str]) -> Optional[int]:
    """Convert an attribute value to int, or None if it is not a 32-bit integer."""
    if value is None or not _INTEGER_PATTERN.fullmatch(value):
        return None
    number = int(value)
    if not INT_MIN <= number <= INT_MAX:
        return None
    return number


class DocumentReader:
    """Reads ``<strings>`` documents into :class:`TextResource` objects.

    Examples:
        >>> reader = DocumentReader()
        >>> resource = TextResource()
        >>> reader.read(BufferDevice(b'<strings><group id="1"/></strings>'), resource)
        True
        >>> [group.id for group in resource]
        [1]
    """

    def __init__(
        self,
        config: Optional[ReaderConfig] = None,
        logger: Optional[DiagnosticLogger] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize document reader.

        Args:
            config: Reader configuration
            logger: Logger receiving error reports; a new one is created if omitted
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ReaderConfig()
        self.logger = logger or get_logger(__name__, correlation_id, "document_reader")
        self._events: Optional[XmlEventReader] = None

    def read(self, device: Device, resource: TextResource) -> bool:
        """Populate ``resource`` from ``device``.

        The device is opened here and always closed before returning. If it
        cannot be opened the resource is left untouched.
        """
        if not device.open(OpenMode.READ_ONLY):
            self.logger.error(
                f"Unable to open XML file for reading: {device.error_string}",
                extra={"device": device.description},
            )
            return False
        try:
            self._events = XmlEventReader(device, self.config)
            return self._parse_document(resource)
        finally:
            device.close()
            self._events = None

    def find_open_tag(self, tag: str) -> TagMatch:
        """Advance to the start element ``tag``.

        The next structural event must be that start element: any other start
        element is an error, while an end element or the end of the document
        means there is no such tag here.
        """
        events = self._require_events()
        if events.is_start_element(tag):
            return TagMatch.found()
        while not events.at_end:
            event = events.read_next()
            if event.type in SKIPPED_EVENTS:
                continue
            if event.type is EventType.INVALID:
                if events.error is StreamError.PREMATURE_END_OF_DOCUMENT:
                    return TagMatch.not_found()
                return self._fail(f"Invalid XML: {events.error_string}")
            if event.type in (EventType.END_DOCUMENT, EventType.END_ELEMENT):
                return TagMatch.not_found()
            if event.name == tag:
                return TagMatch.found()
            return self._fail(f"Invalid XML: expected tag <{tag}>, got <{event.name}>")
        return self._fail("Invalid XML: unexpected end of file")

    def find_close_tag(self, tag: str) -> TagMatch:
        """Advance to the end element ``tag``, discarding everything before it."""
        events = self._require_events()
        if events.is_end_element(tag):
            return TagMatch.found()
        while not events.at_end:
            event = events.read_next()
            if event.type is EventType.END_ELEMENT and event.name == tag:
                return TagMatch.found()
        return self._fail(f"Invalid XML: end element </{tag}> not found")

    def _parse_document(self, resource: TextResource) -> bool:
        if not self.find_open_tag(ROOT_TAG).is_found:
            self._report(f"Unable to find root <{ROOT_TAG}> element")
            return False

        events = self._require_events()
        name = events.attribute(NAME_ATTRIBUTE)
        if name is not None:
            resource.name = name
        resource.index_with_counts = events.attribute(INDEX_WITH_COUNTS_ATTRIBUTE) != "false"

        while True:
            match = self.find_open_tag(GROUP_TAG)
            if match.failed:
                return False
            if not match.is_found:
                break
            if not self._parse_group(resource):
                return False
            if not self.find_close_tag(GROUP_TAG).is_found:
                return False

        return self.find_close_tag(ROOT_TAG).is_found

    def _parse_group(self, resource: TextResource) -> bool:
        group_id = self._read_id("Group")
        if group_id is None:
            return False
        group = TextGroup(group_id)
        events = self._require_events()

        while True:
            match = self.find_open_tag(STRING_TAG)
            if match.failed:
                return False
            if not match.is_found:
                break
            string_id = self._read_id("String")
            if string_id is None:
                return False
            if string_id != len(group):
                self._report(
                    f"Strings in group {group_id} are not ordered properly",
                    group_id=group_id,
                    expected_id=len(group),
                    string_id=string_id,
                )
                return False
            group.add(events.read_element_text())
            if (
                events.current.type is EventType.INVALID
                and events.error is not StreamError.PREMATURE_END_OF_DOCUMENT
            ):
                self._fail(f"Invalid XML: {events.error_string}")
                return False
            # A missing </string> is reported; it only fails the group when configured to
            if self.find_close_tag(STRING_TAG).failed and self.config.require_string_close_tag:
                return False

        resource.add_group(group)
        self.logger.debug(
            f"Read group {group_id} with {len(group)} strings",
            extra={"group_id": group_id, "string_count": len(group)},
        )
        return True

    def _read_id(self, kind: str) -> Optional[int]:
        value = self._require_events().attribute(ID_ATTRIBUTE)
        if value is None:
            self._report(f"{kind} does not have an ID attribute")
            return None
        number = parse_int(value)
        if number is None:
            self._report(f"{kind} ID is not an integer: {value}", value=value)
            return None
        return number

    def _fail(self, message: str) -> TagMatch:
        self._report(message)
        return TagMatch.error(message)

    def _report(self, message: str, **details: Any) -> None:
        line = self._events.line if self._events is not None else None
        self.logger.error(message, line=line, extra=details or None)

    def _require_events(self) -> XmlEventReader:
        if self._events is None:
            raise RuntimeError("DocumentReader is not reading; call read() first")
        return self._events
