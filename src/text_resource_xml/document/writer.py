"""Document writer for text resource XML.

Serializes a :class:`TextResource` with :func:`lxml.etree.xmlfile`, writing
elements one at a time instead of building a tree first.
"""

import re
from typing import Any, Optional

from lxml import etree

from text_resource_xml.model import TextGroup, TextResource
from text_resource_xml.shared import DiagnosticLogger, WriterConfig, get_logger
from text_resource_xml.stream import Device, OpenMode

from .reader import (
    GROUP_TAG,
    ID_ATTRIBUTE,
    INDEX_WITH_COUNTS_ATTRIBUTE,
    NAME_ATTRIBUTE,
    ROOT_TAG,
    STRING_TAG,
)

# Characters outside the XML 1.0 Char production, lone surrogates included
_NON_XML_CHARACTERS = re.compile(
    "[^\t\n\r\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)
REPLACEMENT_CHARACTER = "\ufffd"


class DocumentWriter:
    """Writes :class:`TextResource` objects as ``<strings>`` documents.

    String ``id`` attributes are always the string's position in its group.
    Characters that XML cannot represent (C0 controls other than tab, newline
    and carriage return, lone surrogates, U+FFFE/U+FFFF) are written as
    U+FFFD, so such text does not survive a round trip.
    """

    def __init__(
        self,
        config: Optional[WriterConfig] = None,
        logger: Optional[DiagnosticLogger] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or WriterConfig()
        self.logger = logger or get_logger(__name__, correlation_id, "document_writer")

    def write(self, resource: TextResource, device: Device) -> bool:
        """Write ``resource`` to ``device``.

        Only failing to open the device is reported as an error; the model is
        trusted as is. The device is closed before returning.
        """
        if not device.open(OpenMode.WRITE_ONLY):
            self.logger.error(
                f"Unable to open XML file for writing: {device.error_string}",
                extra={"device": device.description},
            )
            return False
        try:
            with etree.xmlfile(device, encoding=self.config.encoding) as xf:
                if self.config.write_declaration:
                    xf.write_declaration()
                root_attributes = {
                    NAME_ATTRIBUTE: self._xml_safe(resource.name, "name"),
                    INDEX_WITH_COUNTS_ATTRIBUTE: "true" if resource.index_with_counts else "false",
                }
                with xf.element(ROOT_TAG, root_attributes):
                    for group in resource.groups:
                        self._break_line(xf, 1)
                        self._write_group(xf, group)
                    if resource.groups:
                        self._break_line(xf, 0)
        finally:
            device.close()

        self.logger.debug(
            f"Wrote {len(resource.groups)} groups",
            extra={"group_count": len(resource.groups), "device": device.description},
        )
        return True

    def _write_group(self, xf: Any, group: TextGroup) -> None:
        with xf.element(GROUP_TAG, {ID_ATTRIBUTE: str(group.id)}):
            for index, text in enumerate(group.strings):
                self._break_line(xf, 2)
                with xf.element(STRING_TAG, {ID_ATTRIBUTE: str(index)}):
                    if text:
                        xf.write(self._xml_safe(text, f"group {group.id} string {index}"))
            if group.strings:
                self._break_line(xf, 1)

    def _xml_safe(self, text: str, where: str) -> str:
        safe, count = _NON_XML_CHARACTERS.subn(REPLACEMENT_CHARACTER, text)
        if count:
            self.logger.warning(
                f"Replaced {count} characters XML cannot represent in {where}",
                extra={"location": where, "replaced": count},
            )
        return safe

    def _break_line(self, xf: Any, depth: int) -> None:
        if self.config.auto_formatting:
            xf.write("\n" + " " * (self.config.indent * depth))
