"""Forward-only pull reader of XML events.

The reader feeds a device into :class:`lxml.etree.XMLPullParser` chunk by chunk
and turns the parser's start/end/comment/pi events into a flat event stream.
Character data and entity references are not reported by lxml, so they are
synthesized from the text, tail and entity nodes of the partially built tree:
content preceding a node is complete by the time the node's own event arrives.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Deque, Dict, List, Optional, Tuple

from lxml import etree

from text_resource_xml.shared.config import ReaderConfig

from .device import Device

logger = logging.getLogger(__name__)

PULL_EVENTS = ("start", "end", "comment", "pi")


class EventType(Enum):
    """Kinds of events produced by :class:`XmlEventReader`."""

    NO_TOKEN = auto()               # Nothing read yet
    INVALID = auto()                # Stream error; see XmlEventReader.error
    START_DOCUMENT = auto()
    END_DOCUMENT = auto()
    START_ELEMENT = auto()
    END_ELEMENT = auto()
    CHARACTERS = auto()
    COMMENT = auto()
    DTD = auto()
    ENTITY_REFERENCE = auto()       # Unresolved entity, text is "&name;"
    PROCESSING_INSTRUCTION = auto()


class StreamError(Enum):
    """Why the stream became invalid."""

    NONE = auto()
    NOT_WELL_FORMED = auto()
    PREMATURE_END_OF_DOCUMENT = auto()
    CUSTOM = auto()                 # Raised by the consumer


@dataclass
class XmlEvent:
    """Single event of the XML stream."""

    type: EventType
    name: Optional[str] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    text: str = ""
    line: Optional[int] = None


@dataclass
class _OpenElement:
    node: Any
    text_done: bool = False
    last: Any = None  # last child whose trailing content was emitted


def _local_name(tag: str) -> str:
    return etree.QName(tag).localname


class XmlEventReader:
    """Pull-based XML event reader over a readable device.

    The device must already be open for reading; the reader never closes it.

    Examples:
        >>> device = BufferDevice(b"<a>text</a>")
        >>> device.open(OpenMode.READ_ONLY)
        True
        >>> reader = XmlEventReader(device)
        >>> [reader.read_next().type.name for _ in range(4)]
        ['START_DOCUMENT', 'START_ELEMENT', 'CHARACTERS', 'END_ELEMENT']
    """

    def __init__(self, device: Device, config: Optional[ReaderConfig] = None) -> None:
        self.device = device
        self.config = config or ReaderConfig()
        self._parser = etree.XMLPullParser(
            events=PULL_EVENTS,
            no_network=True,
            resolve_entities=self.config.resolve_entities,
            huge_tree=self.config.huge_tree,
        )
        self._queue: Deque[XmlEvent] = deque()
        self._open: List[_OpenElement] = []
        self._current = XmlEvent(EventType.NO_TOKEN)
        self._started = False
        self._input_done = False
        self._at_end = False
        self._pending_error: Tuple[StreamError, str] = (StreamError.NONE, "")
        self._error = StreamError.NONE
        self._error_string = ""
        self._line: Optional[int] = None

    @property
    def current(self) -> XmlEvent:
        return self._current

    @property
    def at_end(self) -> bool:
        """True once END_DOCUMENT or INVALID has been read."""
        return self._at_end

    @property
    def error(self) -> StreamError:
        return self._error

    @property
    def error_string(self) -> str:
        return self._error_string

    @property
    def line(self) -> Optional[int]:
        """Source line of the most recent event that carried one."""
        return self._line

    @property
    def attributes(self) -> Dict[str, str]:
        return self._current.attributes

    def attribute(self, name: str) -> Optional[str]:
        return self._current.attributes.get(name)

    def is_start_element(self, name: Optional[str] = None) -> bool:
        return self._current.type is EventType.START_ELEMENT and (
            name is None or self._current.name == name
        )

    def is_end_element(self, name: Optional[str] = None) -> bool:
        return self._current.type is EventType.END_ELEMENT and (
            name is None or self._current.name == name
        )

    def read_next(self) -> XmlEvent:
        """Advance to the next event and return it.

        Once the stream is at its end the terminal event is returned again.
        """
        if self._at_end:
            return self._current
        if not self._started:
            self._started = True
            return self._set_current(XmlEvent(EventType.START_DOCUMENT))
        while not self._queue:
            self._fill()
        return self._set_current(self._queue.popleft())

    def read_element_text(self) -> str:
        """Read the character data of the current element.

        Must be called on a start element; afterwards the reader is positioned
        on the matching end element. Comments and processing instructions are
        skipped. A child element makes the stream invalid with a custom error.
        """
        if not self.is_start_element():
            return ""
        parts: List[str] = []
        while True:
            event = self.read_next()
            if event.type in (EventType.CHARACTERS, EventType.ENTITY_REFERENCE):
                parts.append(event.text)
            elif event.type in (EventType.COMMENT, EventType.PROCESSING_INSTRUCTION):
                continue
            elif event.type is EventType.START_ELEMENT:
                self.raise_error("Expected character data.")
                break
            else:
                break
        return "".join(parts)

    def raise_error(self, message: str) -> None:
        """Put the stream into the invalid state with a custom error."""
        self._queue.clear()
        self._input_done = True
        self._pending_error = (StreamError.CUSTOM, message)
        self._set_current(XmlEvent(EventType.INVALID, text=message, line=self._line))

    def _set_current(self, event: XmlEvent) -> XmlEvent:
        self._current = event
        if event.line is not None:
            self._line = event.line
        if event.type is EventType.INVALID:
            self._at_end = True
            self._error, self._error_string = self._pending_error
        elif event.type is EventType.END_DOCUMENT:
            self._at_end = True
        return event

    def _fill(self) -> None:
        """Feed the next chunk, or finish the document when input is exhausted."""
        chunk = self.device.read(self.config.chunk_size)
        if chunk:
            try:
                self._parser.feed(chunk)
            except etree.XMLSyntaxError as e:
                self._finish_with_error(StreamError.NOT_WELL_FORMED, e)
                return
            self._drain()
            return

        try:
            self._parser.close()
        except etree.XMLSyntaxError as e:
            # Everything fed was accepted, so the input stopped short
            self._finish_with_error(StreamError.PREMATURE_END_OF_DOCUMENT, e)
            return
        self._drain()
        self._input_done = True
        self._queue.append(XmlEvent(EventType.END_DOCUMENT, line=self._line))

    def _finish_with_error(self, kind: StreamError, exc: etree.XMLSyntaxError) -> None:
        self._drain()
        self._input_done = True
        message = getattr(exc, "msg", None) or str(exc)
        logger.debug("XML stream error (%s): %s", kind.name, message)
        self._pending_error = (kind, message)
        self._queue.append(XmlEvent(EventType.INVALID, text=message, line=exc.lineno))

    def _drain(self) -> None:
        for action, node in self._parser.read_events():
            if action == "start":
                self._on_start(node)
            elif action == "end":
                self._on_end(node)
            elif action == "comment":
                self._on_leaf(node, EventType.COMMENT, None)
            else:
                self._on_leaf(node, EventType.PROCESSING_INSTRUCTION, node.target)

    def _on_start(self, node: Any) -> None:
        if self._open:
            self._flush(self._open[-1], stop=node)
        else:
            # lxml has no doctype event; the DTD is reported just before the
            # root element, after any prolog comments or PIs
            doctype = node.getroottree().docinfo.doctype
            if doctype:
                self._queue.append(XmlEvent(EventType.DTD, text=doctype))
        self._queue.append(
            XmlEvent(
                EventType.START_ELEMENT,
                name=_local_name(node.tag),
                attributes={_local_name(k): v for k, v in node.attrib.items()},
                line=node.sourceline,
            )
        )
        self._open.append(_OpenElement(node))

    def _on_end(self, node: Any) -> None:
        state = self._open.pop()
        self._flush(state)
        self._queue.append(XmlEvent(EventType.END_ELEMENT, name=_local_name(node.tag)))

    def _on_leaf(self, node: Any, event_type: EventType, name: Optional[str]) -> None:
        if self._open:
            self._flush(self._open[-1], stop=node)
        self._queue.append(
            XmlEvent(event_type, name=name, text=node.text or "", line=node.sourceline)
        )

    def _flush(self, state: _OpenElement, stop: Any = None) -> None:
        """Emit content of ``state.node`` that precedes ``stop``.

        Child elements, comments and processing instructions already had their
        own events; only their tails are emitted here. Entity nodes have no
        lxml event and are reported as entity references.
        """
        node = state.node
        if not state.text_done:
            state.text_done = True
            self._queue_characters(node.text)
        if state.last is not None:
            child = state.last.getnext()
        else:
            child = next(iter(node), None)
        while child is not None and child is not stop:
            if child.tag is etree.Entity:
                self._queue.append(
                    XmlEvent(
                        EventType.ENTITY_REFERENCE,
                        name=child.name,
                        text=child.text,
                        line=child.sourceline,
                    )
                )
            self._queue_characters(child.tail)
            state.last = child
            child = child.getnext()

    def _queue_characters(self, text: Optional[str]) -> None:
        if text:
            self._queue.append(XmlEvent(EventType.CHARACTERS, text=text))
