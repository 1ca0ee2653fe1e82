"""Full-text search engine over ALTO and pdf2xml transcriptions."""
from __future__ import annotations

from .errors import (
    AltoParseError,
    EmptyXmlContentError,
    NotSearchableError,
    PdfXmlParseError,
    SearchError,
    UnreadableOcrFileError,
)
from .models import (
    ALTO_MEDIA_TYPE,
    PDF2XML_MEDIA_TYPE,
    AnnotationResult,
    Document,
    ImageSize,
    Media,
    Page,
    SearchHit,
    SearchResponse,
    Zone,
)

__all__ = [
    "ALTO_MEDIA_TYPE",
    "PDF2XML_MEDIA_TYPE",
    "AltoParseError",
    "AnnotationResult",
    "Document",
    "EmptyXmlContentError",
    "ImageSize",
    "Media",
    "NotSearchableError",
    "Page",
    "PdfXmlParseError",
    "SearchError",
    "SearchHit",
    "SearchResponse",
    "UnreadableOcrFileError",
    "Zone",
]
