"""ALTO support: merging of one-file-per-page sets and page walking."""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Callable, Iterable, Optional, Sequence, Tuple

from .errors import AltoParseError, UnreadableOcrFileError
from .matcher import OcrDialect, is_set
from .models import ALTO_MEDIA_TYPE, Media, OcrDocument
from .xmlutils import parse_xml, qualified, split_tag

LOGGER = logging.getLogger(__name__)

DEFAULT_ALTO_NAMESPACE = "http://www.loc.gov/standards/alto/ns-v4#"

RepairEncoding = Callable[[bytes], bytes]


def alto_namespace(namespaces: dict) -> str:
    """Namespace bound to ``alto`` lookups: prefixed, default, then ALTO v4."""

    return namespaces.get("alto") or namespaces.get("") or DEFAULT_ALTO_NAMESPACE


def _layout_of(root: ET.Element) -> Optional[ET.Element]:
    namespace, _ = split_tag(root.tag)
    return root.find(qualified(namespace, "Layout"))


def _first_page(layout: ET.Element) -> Optional[ET.Element]:
    namespace, _ = split_tag(layout.tag)
    return layout.find(qualified(namespace, "Page"))


def _append_empty_page(layout: ET.Element) -> None:
    namespace, _ = split_tag(layout.tag)
    ET.SubElement(layout, qualified(namespace, "Page"))


def _retag(page: ET.Element, namespace: str) -> ET.Element:
    """Move the elements of a page written for another ALTO version into ``namespace``."""

    source, _ = split_tag(page.tag)
    if source == namespace:
        return page
    for element in page.iter():
        element_namespace, name = split_tag(element.tag)
        if element_namespace == source:
            element.tag = qualified(namespace, name)
    return page


def _load(media: Media, repair_encoding: RepairEncoding) -> Optional[Tuple[ET.Element, dict]]:
    try:
        content = repair_encoding(media.read_bytes())
        return parse_xml(content)
    except (UnreadableOcrFileError, ET.ParseError) as error:
        LOGGER.error(
            "Cannot get XML content from media #%s: %s",
            media.id,
            error,
            extra={"event": "unreadable_ocr_file", "media_id": media.id},
        )
        return None


def merge_alto(files: Sequence[Media], *, repair_encoding: RepairEncoding) -> Optional[OcrDocument]:
    """Merge ALTO files holding one page each into a single document.

    The first file provides the metadata and the ``Layout`` receiving the
    pages of the other ones. A file that cannot be read, parsed or that has
    no page is replaced by an empty page so page indexes keep matching the
    images. Returns ``None`` when the first file is unusable.
    """

    if not files:
        return None

    anchor = files[0]
    loaded = _load(anchor, repair_encoding)
    if loaded is None:
        return None
    root, namespaces = loaded

    layout = _layout_of(root)
    if layout is None or not len(layout):
        LOGGER.error(
            "No layout in the first ALTO file of media #%s",
            anchor.id,
            extra={"event": "alto_missing_layout", "media_id": anchor.id},
        )
        return None
    if _first_page(layout) is None:
        _append_empty_page(layout)

    for media in files[1:]:
        loaded = _load(media, repair_encoding)
        current_layout = _layout_of(loaded[0]) if loaded is not None else None
        page = _first_page(current_layout) if current_layout is not None else None
        if page is None:
            _append_empty_page(layout)
            continue
        layout.append(_retag(page, split_tag(layout.tag)[0]))

    return OcrDocument(root=root, namespaces=namespaces, media_type=ALTO_MEDIA_TYPE, media=anchor)


class AltoDialect(OcrDialect):
    """Pages are ``Layout/Page`` nodes, words are ``String`` nodes."""

    media_type = ALTO_MEDIA_TYPE
    parse_error = AltoParseError
    source_label = "xml file from item"

    def page_nodes(self, document: OcrDocument) -> Iterable[ET.Element]:
        layout = _layout_of(document.root)
        if layout is None:
            return []
        namespace, _ = split_tag(layout.tag)
        return layout.findall(qualified(namespace, "Page"))

    def is_placeholder(self, node: ET.Element) -> bool:
        return not node.attrib

    def page_attributes(self, node: ET.Element, index: int) -> Tuple[str, str, str]:
        # The declared PHYSICAL_IMG_NR is not trusted: pages are numbered by position.
        return str(index + 1), node.get("WIDTH", ""), node.get("HEIGHT", "")

    def is_complete(self, number: str, width: str, height: str) -> bool:
        return is_set(width) and is_set(height)

    def text_nodes(self, document: OcrDocument, node: ET.Element) -> Iterable[ET.Element]:
        return node.iter(qualified(alto_namespace(document.namespaces), "String"))

    def text_of(self, node: ET.Element) -> str:
        return node.get("CONTENT", "")

    def zone_attributes(self, node: ET.Element) -> Tuple[str, str, str, str]:
        return node.get("VPOS", ""), node.get("HPOS", ""), node.get("WIDTH", ""), node.get("HEIGHT", "")
