"""Documents stored as numbered directories of files on disk."""
from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, Final, List, Optional

from iiif_search.config import get_settings
from iiif_search.media import XmlMediaTypeDetector, load_media_type_identifiers
from iiif_search.search.models import Document, Media

LOGGER = logging.getLogger(__name__)

METADATA_FILENAME: Final[str] = "media.json"
_DOCUMENT_ID_RE: Final[re.Pattern[str]] = re.compile(r"^[0-9]+$")

RefineMediaType = Callable[[Path, Optional[str]], str]


class DocumentNotFoundError(LookupError):
    """Raised when no directory exists for a document id."""


class DirectoryDocumentStore:
    """Expose ``<root>/<document id>/`` directories as documents.

    Every file of a document directory is a media, in file name order. An
    optional ``media.json`` maps file names to stored metadata such as
    ``width``/``height``, ``dimensions`` or an explicit ``media_type``.
    """

    def __init__(self, root: str | Path, refine_media_type: Optional[RefineMediaType] = None) -> None:
        self.root = Path(root)
        self.refine_media_type = refine_media_type or XmlMediaTypeDetector(load_media_type_identifiers())

    def document_ids(self) -> List[int]:
        if not self.root.is_dir():
            return []
        return sorted(
            int(path.name) for path in self.root.iterdir() if path.is_dir() and _DOCUMENT_ID_RE.match(path.name)
        )

    def get(self, document_id: int) -> Document:
        directory = self.root / str(document_id)
        if document_id < 0 or not directory.is_dir():
            raise DocumentNotFoundError(f"Document #{document_id} not found")

        metadata = self._load_metadata(directory)
        files = sorted(
            path for path in directory.iterdir() if path.is_file() and path.name != METADATA_FILENAME
        )
        media: List[Media] = []
        for media_id, path in enumerate(files, start=1):
            media_data = dict(metadata.get(path.name) or {})
            declared_type = media_data.pop("media_type", None)
            media.append(
                Media(
                    id=media_id,
                    media_type=self.refine_media_type(path, declared_type),
                    path=path.resolve(),
                    media_data=media_data,
                )
            )
        return Document(id=document_id, media=media)

    @staticmethod
    def _load_metadata(directory: Path) -> Dict[str, Dict[str, Any]]:
        path = directory / METADATA_FILENAME
        if not path.is_file():
            return {}
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as error:
            LOGGER.warning("Ignoring unreadable media metadata %s: %s", path, error)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Ignoring media metadata %s: expected an object", path)
            return {}
        return {name: value for name, value in payload.items() if isinstance(value, dict)}


@lru_cache()
def get_document_store() -> DirectoryDocumentStore:
    """Return the store rooted at the configured data directory."""

    return DirectoryDocumentStore(get_settings().data_dir)
