"""Construction of IIIF annotations and page hit summaries."""
from __future__ import annotations

from typing import Iterable, List, Optional, Protocol

from .models import AnnotationResult, Document, ImageSize, Page, SearchHit, Zone


class UriResolver(Protocol):
    def canvas_uri(self, document: Document, page_number: Optional[int] = None) -> str:
        ...

    def annotation_base_uri(self, document: Document) -> str:
        ...


class IiifUriResolver:
    """Build canvas and annotation URIs below a IIIF base URL."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    def canvas_uri(self, document: Document, page_number: Optional[int] = None) -> str:
        canvas = f"{self.base_url}/{document.id}/canvas"
        return canvas if page_number is None else f"{canvas}/p{page_number}"

    def annotation_base_uri(self, document: Document) -> str:
        return f"{self.base_url}/{document.id}/annotation/search-result/"


def _region(zone: Zone) -> str:
    return f"{zone.left or 0},{zone.top or 0},{zone.width or 0},{zone.height or 0}"


def build_annotation(
    document: Document,
    image: Optional[ImageSize],
    page: Optional[Page],
    zone: Zone,
    term: str,
    hit: int,
    *,
    uri_resolver: UriResolver,
) -> AnnotationResult:
    """Return the annotation of one match.

    The identifier is made of the canvas number, the hit ordinal and the
    region, so the same inputs always give the same identifier.
    """

    page_number = page.number if page is not None else None
    region = _region(zone)
    annotation_id = f"{uri_resolver.annotation_base_uri(document)}a{page_number or 0}h{hit}r{region}"
    on = f"{uri_resolver.canvas_uri(document, page_number)}#xywh={region}"
    return AnnotationResult(
        id=annotation_id,
        on=on,
        chars=zone.text or "",
        hit=hit,
        page=page,
        zone=zone,
        term=term,
        image=image,
    )


def build_search_hit(annotation_ids: Iterable[str], matches: Iterable[str]) -> SearchHit:
    distinct: List[str] = []
    for match in matches:
        if match not in distinct:
            distinct.append(match)
    return SearchHit(annotations=list(annotation_ids), match=" ".join(distinct))
