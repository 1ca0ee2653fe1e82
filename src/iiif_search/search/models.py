"""Data models shared by the search engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
from xml.etree.ElementTree import Element

from .errors import UnreadableOcrFileError

ALTO_MEDIA_TYPE = "application/alto+xml"
PDF2XML_MEDIA_TYPE = "application/vnd.pdf2xml+xml"
SUPPORTED_MEDIA_TYPES = (ALTO_MEDIA_TYPE, PDF2XML_MEDIA_TYPE)
GENERIC_XML_MEDIA_TYPES = ("text/xml", "application/xml")


@dataclass(slots=True)
class Media:
    """A file attached to a document, with its refined media type."""

    id: int
    media_type: str
    path: Optional[Path] = None
    media_data: Dict[str, Any] = field(default_factory=dict)

    @property
    def filename(self) -> str:
        return self.path.name if self.path is not None else ""

    @property
    def has_original(self) -> bool:
        return self.path is not None and self.path.is_file()

    def read_bytes(self) -> bytes:
        if self.path is None:
            raise UnreadableOcrFileError(f"Media #{self.id} has no stored original", media_id=self.id)
        try:
            return self.path.read_bytes()
        except OSError as exc:
            raise UnreadableOcrFileError(
                f"Cannot read file of media #{self.id}: {exc}", cause=exc, media_id=self.id
            ) from exc


@dataclass(slots=True)
class Document:
    """A digitized document made of images and OCR transcriptions."""

    id: int
    media: List[Media] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ImageSize:
    width: int
    height: int


@dataclass(frozen=True, slots=True)
class Page:
    """Geometry of one OCR page, ``index`` being its 0-based position."""

    index: int
    number: int
    width: int
    height: int


@dataclass(frozen=True, slots=True)
class Zone:
    """Bounding box of a text token or row, in OCR coordinates."""

    text: str
    top: int = 0
    left: int = 0
    width: int = 0
    height: int = 0


@dataclass(slots=True)
class OcrDocument:
    """Parsed OCR XML ready to be walked by a matcher."""

    root: Element
    namespaces: Dict[str, str]
    media_type: str
    media: Media


@dataclass(frozen=True, slots=True)
class AnnotationResult:
    """One match positioned on a canvas."""

    id: str
    on: str
    chars: str
    hit: int
    page: Optional[Page]
    zone: Zone
    term: str
    image: Optional[ImageSize] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "oa:Annotation",
            "motivation": "sc:painting",
            "resource": {"type": "cnt:ContentAsText", "chars": self.chars},
            "on": self.on,
        }


@dataclass(frozen=True, slots=True)
class SearchHit:
    """Summary of the annotations found on one page."""

    annotations: List[str]
    match: str

    def to_dict(self) -> Dict[str, Any]:
        return {"annotations": list(self.annotations), "match": self.match}


@dataclass(slots=True)
class SearchResponse:
    resources: List[AnnotationResult] = field(default_factory=list)
    hits: List[SearchHit] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resources": [resource.to_dict() for resource in self.resources],
            "hits": [hit.to_dict() for hit in self.hits],
        }
