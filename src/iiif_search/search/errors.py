"""Exceptions raised by the search engine."""
from __future__ import annotations


class SearchError(RuntimeError):
    """Base class for failures that abort a single search request."""

    def __init__(
        self,
        message: str,
        *,
        cause: Exception | None = None,
        document_id: int | None = None,
        media_id: int | None = None,
        page_index: int | None = None,
    ) -> None:
        super().__init__(message)
        self.__cause__ = cause
        self.document_id = document_id
        self.media_id = media_id
        self.page_index = page_index


class NotSearchableError(SearchError):
    """Raised when a document has no OCR file or no sized image."""


class UnreadableOcrFileError(SearchError):
    """Raised when the stored original of an OCR file cannot be read."""


class EmptyXmlContentError(SearchError):
    """Raised when an OCR file is empty after encoding repair."""


class AltoParseError(SearchError):
    """Raised when ALTO content cannot be parsed or walked."""


class PdfXmlParseError(SearchError):
    """Raised when pdf2xml content cannot be parsed or walked."""
