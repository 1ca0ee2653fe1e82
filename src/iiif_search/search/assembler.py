"""Selection of the OCR files and image sizes of a document."""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional

from .alto import merge_alto
from .errors import AltoParseError, EmptyXmlContentError, NotSearchableError, PdfXmlParseError
from .models import (
    ALTO_MEDIA_TYPE,
    GENERIC_XML_MEDIA_TYPES,
    PDF2XML_MEDIA_TYPE,
    SUPPORTED_MEDIA_TYPES,
    Document,
    ImageSize,
    Media,
    OcrDocument,
)
from .pdf2xml import clean_pdf2xml
from .xmlutils import parse_xml

LOGGER = logging.getLogger(__name__)

ReadImageDimensions = Callable[[Path], ImageSize]
RepairEncoding = Callable[[bytes], bytes]


def _pass_through(content: bytes) -> bytes:
    return content


@dataclass(slots=True)
class PreparedDocument:
    """OCR files and page image sizes of a searchable document.

    Image sizes are listed in the order of the image media and are joined to
    OCR pages by position.
    """

    document: Document
    ocr_files: List[Media]
    image_sizes: List[ImageSize]

    @property
    def media_type(self) -> str:
        return self.ocr_files[0].media_type

    @property
    def anchor(self) -> Media:
        return self.ocr_files[0]


def _size_from(data: Any) -> Optional[ImageSize]:
    if not isinstance(data, Mapping) or "width" not in data:
        return None
    try:
        return ImageSize(width=int(data.get("width") or 0), height=int(data.get("height") or 0))
    except (TypeError, ValueError):
        return ImageSize(width=0, height=0)


def image_size_of(media: Media, read_image_dimensions: Optional[ReadImageDimensions]) -> Optional[ImageSize]:
    """Size from stored metadata, then from stored dimensions, then from the file."""

    size = _size_from(media.media_data)
    if size is not None:
        return size

    dimensions = media.media_data.get("dimensions")
    if isinstance(dimensions, Mapping):
        size = _size_from(dimensions.get("original"))
        if size is not None:
            return size

    if media.media_type.partition("/")[0] == "image" and media.has_original:
        if read_image_dimensions is None:
            return ImageSize(width=0, height=0)
        return read_image_dimensions(media.path)
    return None


def prepare(document: Document, *, read_image_dimensions: Optional[ReadImageDimensions] = None) -> PreparedDocument:
    """Return the OCR files and image sizes, or raise :class:`NotSearchableError`."""

    ocr_files: List[Media] = []
    image_sizes: List[ImageSize] = []
    for media in document.media:
        if media.media_type in SUPPORTED_MEDIA_TYPES:
            ocr_files.append(media)
        elif media.media_type in GENERIC_XML_MEDIA_TYPES:
            LOGGER.warning(
                'Xml format "%s" of media #%s is not precise enough and is skipped.',
                media.media_type,
                media.id,
                extra={"event": "imprecise_xml_media_type", "document_id": document.id, "media_id": media.id},
            )
        else:
            size = image_size_of(media, read_image_dimensions)
            if size is not None:
                image_sizes.append(size)

    if not ocr_files or not image_sizes:
        raise NotSearchableError(
            f"Document #{document.id} has no searchable text", document_id=document.id
        )
    return PreparedDocument(document=document, ocr_files=ocr_files, image_sizes=image_sizes)


def _parse_error_for(media_type: str):
    return PdfXmlParseError if media_type == PDF2XML_MEDIA_TYPE else AltoParseError


def load_ocr(prepared: PreparedDocument, *, repair_encoding: Optional[RepairEncoding] = None) -> OcrDocument:
    """Parse the OCR transcription, merging ALTO files when there are several."""

    repair = repair_encoding or _pass_through
    document_id = prepared.document.id
    anchor = prepared.anchor
    media_type = prepared.media_type

    if media_type == ALTO_MEDIA_TYPE and len(prepared.ocr_files) > 1:
        merged = merge_alto(prepared.ocr_files, repair_encoding=repair)
        if merged is None:
            raise AltoParseError(
                f"Cannot merge the ALTO files of document #{document_id}",
                document_id=document_id,
                media_id=anchor.id,
            )
        return merged

    content = repair(anchor.read_bytes())
    if not content or not content.strip():
        raise EmptyXmlContentError(
            f"XML content seems empty for media #{anchor.id}", document_id=document_id, media_id=anchor.id
        )

    if media_type == PDF2XML_MEDIA_TYPE:
        content = clean_pdf2xml(content)

    try:
        root, namespaces = parse_xml(content)
    except ET.ParseError as exc:
        raise _parse_error_for(media_type)(
            f"Cannot get XML content from media #{anchor.id}",
            cause=exc,
            document_id=document_id,
            media_id=anchor.id,
        ) from exc
    return OcrDocument(root=root, namespaces=namespaces, media_type=media_type, media=anchor)
