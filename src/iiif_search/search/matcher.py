"""Generic matcher walking the pages, rows and words of an OCR document."""
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Sequence, Tuple, Type
from xml.etree.ElementTree import Element

from .annotations import UriResolver, build_annotation, build_search_hit
from .errors import SearchError
from .models import Document, ImageSize, OcrDocument, Page, SearchResponse, Zone

LOGGER = logging.getLogger(__name__)


class OcrDialect(ABC):
    """Access to the page and text structure of one OCR XML schema."""

    media_type: str
    parse_error: Type[SearchError]
    source_label: str
    reports_rows = False

    @abstractmethod
    def page_nodes(self, document: OcrDocument) -> Iterable[Element]:
        ...

    def is_placeholder(self, node: Element) -> bool:
        return False

    @abstractmethod
    def page_attributes(self, node: Element, index: int) -> Tuple[str, str, str]:
        """Return the raw ``(number, width, height)`` of a page node."""

    @abstractmethod
    def is_complete(self, number: str, width: str, height: str) -> bool:
        ...

    @abstractmethod
    def text_nodes(self, document: OcrDocument, node: Element) -> Iterable[Element]:
        ...

    @abstractmethod
    def text_of(self, node: Element) -> str:
        ...

    @abstractmethod
    def zone_attributes(self, node: Element) -> Tuple[str, str, str, str]:
        """Return the raw ``(top, left, width, height)`` of a text node."""

    def source_id(self, document: Document, ocr: OcrDocument) -> int:
        return document.id


def to_int(value: str) -> Optional[int]:
    try:
        return int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return None


def is_set(value: Optional[str]) -> bool:
    """Whether a raw size attribute is given: not empty and not ``"0"``."""

    return bool(value) and value.strip() != "0"


def _page_of(dialect: OcrDialect, number: str, width: str, height: str, index: int) -> Tuple[Optional[Page], str]:
    if not dialect.is_complete(number, width, height):
        return None, "incomplete_page_data"
    page_width, page_height = to_int(width), to_int(height)
    if page_width is None or page_height is None:
        return None, "incomplete_page_data"
    page_number = to_int(number)
    if page_number is None or page_number - 1 != index:
        return None, "inconsistent_page_data"
    return Page(index=index, number=page_number, width=page_width, height=page_height), ""


def _zone_of(text: str, top: str, left: str, width: str, height: str) -> Optional[Zone]:
    if not top or not left or not is_set(width) or not is_set(height):
        return None
    values = [to_int(value) for value in (top, left, width, height)]
    if any(value is None for value in values):
        return None
    return Zone(text=text, top=values[0], left=values[1], width=values[2], height=values[3])


def usable_image(image_sizes: Sequence[ImageSize], page_index: int) -> Optional[ImageSize]:
    """Return the image size of a page when both of its dimensions are known."""

    if page_index < 0 or page_index >= len(image_sizes):
        return None
    image = image_sizes[page_index]
    if not image.width or not image.height:
        return None
    return image


def match_pages(
    dialect: OcrDialect,
    document: Document,
    ocr: OcrDocument,
    terms: Sequence[str],
    image_sizes: Sequence[ImageSize],
    *,
    uri_resolver: UriResolver,
) -> SearchResponse:
    """Search every text node of every page and build the response.

    Pages with missing or inconsistent geometry are logged and skipped, as
    are matches without a usable bounding box. Any other failure aborts the
    whole search with the dialect's parse error.
    """

    patterns = [(term, re.compile(term, re.IGNORECASE)) for term in terms]
    source_id = dialect.source_id(document, ocr)
    response = SearchResponse()
    hit = 0
    index = -1

    try:
        for index, node in enumerate(dialect.page_nodes(ocr)):
            if dialect.is_placeholder(node):
                continue

            page, problem = _page_of(dialect, *dialect.page_attributes(node, index), index=index)
            if page is None:
                LOGGER.warning(
                    "%s data for %s #%s, page %s.",
                    "Incomplete" if problem == "incomplete_page_data" else "Inconsistent",
                    dialect.source_label,
                    source_id,
                    index,
                    extra={"event": problem, "document_id": document.id, "media_id": ocr.media.id, "page": index},
                )
                continue

            image = usable_image(image_sizes, page.index)
            if image is None:
                LOGGER.debug("No image size for page %s of document #%s", page.number, document.id)
                continue

            annotation_ids: List[str] = []
            matches: List[str] = []
            for row, text_node in enumerate(dialect.text_nodes(ocr, node)):
                text = dialect.text_of(text_node)
                for term, pattern in patterns:
                    found = pattern.search(text)
                    if found is None:
                        continue

                    zone = _zone_of(text, *dialect.zone_attributes(text_node))
                    if zone is None:
                        _warn_zone(dialect, document, ocr, source_id, page, row)
                        continue

                    hit += 1
                    annotation = build_annotation(
                        document, image, page, zone, term, hit, uri_resolver=uri_resolver
                    )
                    response.resources.append(annotation)
                    annotation_ids.append(annotation.id)
                    matches.append(found.group(0))

            if annotation_ids:
                response.hits.append(build_search_hit(annotation_ids, matches))
    except SearchError:
        raise
    except Exception as exc:
        raise dialect.parse_error(
            f"Invalid {dialect.media_type} content for document #{document.id}, page {index + 1}",
            cause=exc,
            document_id=document.id,
            media_id=ocr.media.id,
            page_index=index + 1,
        ) from exc

    return response


def _warn_zone(
    dialect: OcrDialect, document: Document, ocr: OcrDocument, source_id: int, page: Page, row: int
) -> None:
    extra = {"event": "incomplete_zone_data", "document_id": document.id, "media_id": ocr.media.id}
    if dialect.reports_rows:
        LOGGER.warning(
            "Inconsistent data for %s #%s, page %s, row %s.",
            dialect.source_label,
            source_id,
            page.index,
            row,
            extra={**extra, "page": page.index, "row": row},
        )
    else:
        LOGGER.warning(
            "Inconsistent data for %s #%s, page %s.",
            dialect.source_label,
            source_id,
            page.number,
            extra={**extra, "page": page.number},
        )
