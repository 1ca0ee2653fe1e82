"""Entry point answering a full-text query for one document."""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Optional

from iiif_search.config import SearchSettings, get_settings
from iiif_search.media import read_image_dimensions as probe_image_dimensions
from iiif_search.media import repair_encoding as repair_xml_encoding

from .alto import AltoDialect
from .annotations import IiifUriResolver, UriResolver
from .assembler import ReadImageDimensions, RepairEncoding, load_ocr, prepare
from .errors import NotSearchableError, SearchError
from .matcher import OcrDialect, match_pages
from .models import Document, SearchResponse
from .pdf2xml import Pdf2XmlDialect
from .query import normalize

LOGGER = logging.getLogger(__name__)

DIALECTS: Dict[str, OcrDialect] = {
    dialect.media_type: dialect for dialect in (AltoDialect(), Pdf2XmlDialect())
}


class SearchService:
    """Search the OCR of a document and position the matches on its canvases."""

    def __init__(
        self,
        settings: Optional[SearchSettings] = None,
        *,
        uri_resolver: Optional[UriResolver] = None,
        repair_encoding: Optional[RepairEncoding] = repair_xml_encoding,
        read_image_dimensions: Optional[ReadImageDimensions] = probe_image_dimensions,
    ) -> None:
        self.settings = settings or get_settings()
        self.uri_resolver = uri_resolver or IiifUriResolver(self.settings.base_url)
        self.repair_encoding = repair_encoding
        self.read_image_dimensions = read_image_dimensions

    def search(self, document: Document, query: str) -> Optional[SearchResponse]:
        """Return the matches of ``query``.

        ``None`` means that the document does not support search or that its
        OCR could not be read; an empty response means that nothing was
        searched or found.
        """

        try:
            prepared = prepare(document, read_image_dimensions=self.read_image_dimensions)
        except NotSearchableError:
            LOGGER.debug("Document #%s does not support search", document.id)
            return None

        terms = normalize(query, self.settings.minimum_query_length)
        if not terms:
            return SearchResponse()

        dialect = DIALECTS[prepared.media_type]
        try:
            ocr = load_ocr(prepared, repair_encoding=self.repair_encoding)
            page_count = len(list(dialect.page_nodes(ocr)))
            if page_count != len(prepared.image_sizes):
                LOGGER.warning(
                    "Document #%s has %s OCR pages for %s images.",
                    document.id,
                    page_count,
                    len(prepared.image_sizes),
                    extra={"event": "page_image_mismatch", "document_id": document.id},
                )
            response = match_pages(
                dialect,
                document,
                ocr,
                terms,
                prepared.image_sizes,
                uri_resolver=self.uri_resolver,
            )
        except SearchError as error:
            LOGGER.error(
                "Error: %s",
                error,
                extra={
                    "event": type(error).__name__,
                    "document_id": document.id,
                    "media_id": error.media_id if error.media_id is not None else prepared.anchor.id,
                    "page": error.page_index,
                },
            )
            return None

        LOGGER.info(
            "Query on document #%s found %s matches on %s pages",
            document.id,
            len(response.resources),
            len(response.hits),
        )
        return response


@lru_cache()
def get_search_service() -> SearchService:
    """Return the shared service built from the environment settings."""

    return SearchService(get_settings())
