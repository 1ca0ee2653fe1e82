"""Detection of precise media types for XML and zipped files."""
from __future__ import annotations

import json
import logging
import mimetypes
import re
import xml.etree.ElementTree as ET
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from iiif_search.search.xmlutils import split_tag

LOGGER = logging.getLogger(__name__)

GENERIC_XML_TYPES = ("text/xml", "application/xml")
ZIP_TYPE = "application/zip"
DEFAULT_MEDIA_TYPE = "application/octet-stream"

_OPENDOCUMENT_OFFICE_NS = "urn:oasis:names:tc:opendocument:xmlns:office:1.0"
_IGNORED_PROCESSING_INSTRUCTIONS = ("xml", "xml-stylesheet", "oxygen")
_HEAD_SIZE = 65536

_COMMENT_RE = re.compile(rb"<!--.*?-->", re.DOTALL)
_DOCTYPE_RE = re.compile(rb"<!DOCTYPE\s+([^\s>\[]+)", re.IGNORECASE)
_PROCESSING_INSTRUCTION_RE = re.compile(rb"<\?([^\s?]+)(.*?)\?>", re.DOTALL)
_HREF_RE = re.compile(rb'href="(.+?)"', re.IGNORECASE | re.MULTILINE)
_ELEMENT_RE = re.compile(rb"<[A-Za-z_]")


@lru_cache(maxsize=1)
def load_media_type_identifiers() -> Mapping[str, str]:
    """Load the read-only table mapping XML identifiers to media types."""

    payload = resources.files("iiif_search.media").joinpath("data/media_type_identifiers.json").read_text(
        encoding="utf-8"
    )
    return MappingProxyType(json.loads(payload))


class XmlMediaTypeDetector:
    """Refine a coarse media type by looking inside the file.

    XML files are identified by their doctype, a processing instruction
    pointing to a schema, the namespace of the root element or its name.
    Zipped files are identified by their uncompressed ``mimetype`` entry.
    """

    def __init__(self, identifiers: Mapping[str, str]) -> None:
        self._identifiers = identifiers

    def refine(self, path: str | Path, media_type: Optional[str] = None) -> str:
        path = Path(path)
        if not media_type:
            media_type = self.simple_media_type(path)
        if media_type in GENERIC_XML_TYPES:
            media_type = self.xml_media_type(path) or media_type
        if media_type == ZIP_TYPE:
            media_type = self.zip_media_type(path) or media_type
        return media_type

    __call__ = refine

    @staticmethod
    def simple_media_type(path: Path) -> str:
        guessed, _ = mimetypes.guess_type(path.name)
        return guessed or DEFAULT_MEDIA_TYPE

    def xml_media_type(self, path: Path) -> Optional[str]:
        try:
            with path.open("rb") as handle:
                head = handle.read(_HEAD_SIZE)
        except OSError as error:
            LOGGER.error("The file %s is not readable: %s", path, error)
            return None

        identifier = self._identifier_from_prolog(head)
        if identifier is None:
            identifier = self._identifier_from_root(path)
        if identifier is None:
            return None
        return self._identifiers.get(identifier)

    @staticmethod
    def _identifier_from_prolog(head: bytes) -> Optional[str]:
        element = _ELEMENT_RE.search(head)
        prolog = _COMMENT_RE.sub(b"", head[: element.start()] if element else head)

        candidates = []
        doctype = _DOCTYPE_RE.search(prolog)
        if doctype:
            candidates.append((doctype.start(), doctype.group(1)))
        for instruction in _PROCESSING_INSTRUCTION_RE.finditer(prolog):
            name = instruction.group(1).decode("utf-8", "replace").lower()
            if name in _IGNORED_PROCESSING_INSTRUCTIONS:
                continue
            href = _HREF_RE.search(instruction.group(2))
            if href:
                candidates.append((instruction.start(), href.group(1)))
                break

        if not candidates:
            return None
        _, value = min(candidates)
        return value.decode("utf-8", "replace")

    @staticmethod
    def _identifier_from_root(path: Path) -> Optional[str]:
        try:
            with path.open("rb") as handle:
                for _, element in ET.iterparse(handle, events=("start",)):
                    return _root_identifier(element)
        except (OSError, ET.ParseError, ValueError, LookupError) as error:
            # ValueError and LookupError come from encodings expat cannot decode.
            LOGGER.error("The file %s is not parsable as xml: %s", path, error)
        return None

    @staticmethod
    def zip_media_type(path: Path) -> Optional[str]:
        try:
            with path.open("rb") as handle:
                contents = handle.read(256)
        except OSError as error:
            LOGGER.error("The file %s is not readable: %s", path, error)
            return None
        if contents[30:38] != b"mimetype":
            return None
        end = contents.find(b"PK", 38)
        value = contents[38:end] if end != -1 else contents[38:]
        return value.decode("ascii", "replace") or None


def _root_identifier(element: ET.Element) -> str:
    namespace, name = split_tag(element.tag)
    if namespace == _OPENDOCUMENT_OFFICE_NS:
        mimetype = element.get(f"{{{_OPENDOCUMENT_OFFICE_NS}}}mimetype")
        if mimetype:
            return mimetype
    return namespace or name
