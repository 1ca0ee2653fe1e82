"""pdf2xml support: content clean-up and page walking."""
from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Iterable, Tuple

from .errors import PdfXmlParseError
from .matcher import OcrDialect
from .models import PDF2XML_MEDIA_TYPE, Document, OcrDocument

_WHITESPACE_RUN_RE = re.compile(rb"\s{2,}")
_STYLE_TAG_RE = re.compile(rb"</?[bi]>", re.IGNORECASE)
_LOWERCASE_DOCTYPE = b'<!doctype pdf2xml system "pdf2xml.dtd">'
_DOCTYPE = b'<!DOCTYPE pdf2xml SYSTEM "pdf2xml.dtd">'


def clean_pdf2xml(content: bytes) -> bytes:
    """Flatten bold/italic markup and whitespace so rows are plain text."""

    content = _WHITESPACE_RUN_RE.sub(b" ", content)
    content = _STYLE_TAG_RE.sub(b"", content)
    return content.replace(_LOWERCASE_DOCTYPE, _DOCTYPE)


class Pdf2XmlDialect(OcrDialect):
    """Pages are ``page`` nodes, rows are positioned ``text`` nodes."""

    media_type = PDF2XML_MEDIA_TYPE
    parse_error = PdfXmlParseError
    source_label = "xml file from pdf media"
    reports_rows = True

    def page_nodes(self, document: OcrDocument) -> Iterable[ET.Element]:
        return document.root.findall("page")

    def page_attributes(self, node: ET.Element, index: int) -> Tuple[str, str, str]:
        return node.get("number", ""), node.get("width", ""), node.get("height", "")

    def is_complete(self, number: str, width: str, height: str) -> bool:
        # "0" is a valid size here: only missing or empty values are incomplete.
        return bool(number) and bool(width) and bool(height)

    def text_nodes(self, document: OcrDocument, node: ET.Element) -> Iterable[ET.Element]:
        return node.findall("text")

    def text_of(self, node: ET.Element) -> str:
        return "".join(node.itertext())

    def zone_attributes(self, node: ET.Element) -> Tuple[str, str, str, str]:
        return node.get("top", ""), node.get("left", ""), node.get("width", ""), node.get("height", "")

    def source_id(self, document: Document, ocr: OcrDocument) -> int:
        return ocr.media.id
