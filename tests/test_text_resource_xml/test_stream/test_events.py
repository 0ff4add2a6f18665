"""Tests for the pull-based XML event reader."""

import pytest

from text_resource_xml.shared import ReaderConfig
from text_resource_xml.stream import (
    BufferDevice,
    EventType,
    OpenMode,
    StreamError,
    XmlEventReader,
)


@pytest.fixture
def open_reader():
    """Create an event reader over in-memory XML."""
    devices = []

    def _create(xml, **config_values):
        data = xml.encode("utf-8") if isinstance(xml, str) else xml
        device = BufferDevice(data)
        assert device.open(OpenMode.READ_ONLY)
        devices.append(device)
        return XmlEventReader(device, ReaderConfig(**config_values))

    yield _create
    for device in devices:
        device.close()


def _collect(reader):
    events = []
    while True:
        event = reader.read_next()
        events.append(event)
        if reader.at_end:
            return events


def _types(events):
    return [event.type for event in events]


class TestXmlEventReader:
    """Test suite for XmlEventReader."""

    def test_initial_state(self, open_reader):
        reader = open_reader("<a/>")

        assert reader.current.type is EventType.NO_TOKEN
        assert reader.error is StreamError.NONE
        assert not reader.at_end

    def test_simple_document(self, open_reader):
        reader = open_reader('<a x="1">text</a>')
        events = _collect(reader)

        assert _types(events) == [
            EventType.START_DOCUMENT,
            EventType.START_ELEMENT,
            EventType.CHARACTERS,
            EventType.END_ELEMENT,
            EventType.END_DOCUMENT,
        ]
        assert events[1].name == "a"
        assert events[1].attributes == {"x": "1"}
        assert events[2].text == "text"
        assert events[3].name == "a"
        assert reader.error is StreamError.NONE

    def test_terminal_event_repeats(self, open_reader):
        reader = open_reader("<a/>")
        _collect(reader)

        assert reader.read_next().type is EventType.END_DOCUMENT
        assert reader.read_next().type is EventType.END_DOCUMENT

    def test_document_order_of_mixed_content(self, open_reader):
        """Test that text, children, comments and tails keep document order."""
        reader = open_reader("<a>one<b>two</b>three<!--note-->four<?pi data?>five</a>")
        events = _collect(reader)[1:-1]

        assert [(event.type, event.name or event.text) for event in events] == [
            (EventType.START_ELEMENT, "a"),
            (EventType.CHARACTERS, "one"),
            (EventType.START_ELEMENT, "b"),
            (EventType.CHARACTERS, "two"),
            (EventType.END_ELEMENT, "b"),
            (EventType.CHARACTERS, "three"),
            (EventType.COMMENT, "note"),
            (EventType.CHARACTERS, "four"),
            (EventType.PROCESSING_INSTRUCTION, "pi"),
            (EventType.CHARACTERS, "five"),
            (EventType.END_ELEMENT, "a"),
        ]

    def test_small_chunks_give_same_events(self, open_reader):
        xml = '<strings name="n"><group id="1"><string id="0">Hello</string></group></strings>'
        whole = _collect(open_reader(xml))
        chunked = _collect(open_reader(xml, chunk_size=3))

        assert [(e.type, e.name, e.attributes) for e in chunked] == [
            (e.type, e.name, e.attributes) for e in whole
        ]
        texts = "".join(e.text for e in chunked if e.type is EventType.CHARACTERS)
        assert texts == "Hello"

    def test_line_numbers(self, open_reader):
        reader = open_reader("<a>\n  <b/>\n</a>")
        reader.read_next()
        assert reader.read_next().line == 1
        reader.read_next()  # whitespace
        assert reader.read_next().line == 2
        assert reader.line == 2

    def test_dtd_event(self, open_reader):
        reader = open_reader('<!DOCTYPE strings SYSTEM "strings.dtd"><strings/>')
        events = _collect(reader)

        assert EventType.DTD in _types(events)
        assert _types(events).index(EventType.DTD) < _types(events).index(EventType.START_ELEMENT)

    def test_dtd_event_precedes_root(self, open_reader):
        """Test that the DTD is reported right before the root element."""
        reader = open_reader('<!DOCTYPE strings [<!ELEMENT strings ANY>]><!-- note --><strings/>')
        types = _types(_collect(reader))

        assert types.index(EventType.DTD) == types.index(EventType.START_ELEMENT) - 1

    def test_unresolved_entity_reference(self, open_reader):
        reader = open_reader(
            '<!DOCTYPE a [<!ENTITY who "World">]><a>Hello &who;!</a>'
        )
        events = [e for e in _collect(reader) if e.type in (EventType.CHARACTERS, EventType.ENTITY_REFERENCE)]

        assert [(e.type, e.text) for e in events] == [
            (EventType.CHARACTERS, "Hello "),
            (EventType.ENTITY_REFERENCE, "&who;"),
            (EventType.CHARACTERS, "!"),
        ]

    def test_not_well_formed(self, open_reader):
        reader = open_reader("<a><b></a>")
        events = _collect(reader)

        assert events[-1].type is EventType.INVALID
        assert reader.at_end
        assert reader.error_string
        assert reader.error in (StreamError.NOT_WELL_FORMED, StreamError.PREMATURE_END_OF_DOCUMENT)

    def test_premature_end(self, open_reader):
        reader = open_reader("<a><b>text</b>")
        events = _collect(reader)

        assert events[-1].type is EventType.INVALID
        assert reader.error is StreamError.PREMATURE_END_OF_DOCUMENT
        # Content before the truncation is still reported
        assert EventType.END_ELEMENT in _types(events)

    def test_attribute_access(self, open_reader):
        reader = open_reader('<a id="3" name="n"/>')
        reader.read_next()
        reader.read_next()

        assert reader.is_start_element()
        assert reader.is_start_element("a")
        assert not reader.is_start_element("b")
        assert reader.attribute("id") == "3"
        assert reader.attribute("missing") is None
        assert reader.attributes == {"id": "3", "name": "n"}

    def test_read_element_text(self, open_reader):
        reader = open_reader("<a>one<!--skip-->two</a>")
        reader.read_next()
        reader.read_next()

        assert reader.read_element_text() == "onetwo"
        assert reader.is_end_element("a")

    def test_read_element_text_rejects_child(self, open_reader):
        reader = open_reader("<a>one<b/></a>")
        reader.read_next()
        reader.read_next()

        reader.read_element_text()
        assert reader.current.type is EventType.INVALID
        assert reader.error is StreamError.CUSTOM
        assert reader.error_string == "Expected character data."
        assert reader.at_end

    def test_read_element_text_off_start_element(self, open_reader):
        reader = open_reader("<a>text</a>")
        assert reader.read_element_text() == ""

    def test_raise_error(self, open_reader):
        reader = open_reader("<a><b/></a>")
        reader.read_next()
        reader.raise_error("stop here")

        assert reader.current.type is EventType.INVALID
        assert reader.error is StreamError.CUSTOM
        assert reader.error_string == "stop here"
        assert reader.read_next().type is EventType.INVALID
