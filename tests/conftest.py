"""Shared fixtures building ALTO, pdf2xml and image files on disk."""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import pytest
from PIL import Image

from iiif_search.config import SearchSettings
from iiif_search.search.models import ALTO_MEDIA_TYPE, PDF2XML_MEDIA_TYPE, Document, Media
from iiif_search.search.service import SearchService

ALTO_NS = "http://www.loc.gov/standards/alto/ns-v4#"
BASE_URL = "http://example.org/iiif"

# (content, vpos, hpos, width, height)
StringSpec = Tuple[str, str, str, str, str]


def alto_page(
    strings: Iterable[StringSpec] = (),
    *,
    width: Optional[str] = "800",
    height: Optional[str] = "1000",
    physical: str = "1",
) -> str:
    attributes = [f'ID="page_{physical}"', f'PHYSICAL_IMG_NR="{physical}"']
    if width is not None:
        attributes.append(f'WIDTH="{width}"')
    if height is not None:
        attributes.append(f'HEIGHT="{height}"')
    words = "".join(
        f'<String CONTENT="{content}" VPOS="{vpos}" HPOS="{hpos}" WIDTH="{w}" HEIGHT="{h}"/><SP/>'
        for content, vpos, hpos, w, h in strings
    )
    return (
        f"<Page {' '.join(attributes)}><PrintSpace><TextBlock ID=\"block_{physical}\">"
        f"<TextLine>{words}</TextLine></TextBlock></PrintSpace></Page>"
    )


def alto_xml(*pages: str, namespace: str = ALTO_NS, prefix: str = "") -> bytes:
    if prefix:
        body = "".join(pages)
        body = body.replace("<", f"<{prefix}:").replace(f"<{prefix}:/", f"</{prefix}:")
        return (
            f'<?xml version="1.0" encoding="UTF-8"?>\n'
            f'<{prefix}:alto xmlns:{prefix}="{namespace}">'
            f"<{prefix}:Description><{prefix}:MeasurementUnit>pixel</{prefix}:MeasurementUnit></{prefix}:Description>"
            f"<{prefix}:Layout>{body}</{prefix}:Layout></{prefix}:alto>"
        ).encode("utf-8")
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<alto xmlns="{namespace}" xmlns:xlink="http://www.w3.org/1999/xlink">'
        f"<Description><MeasurementUnit>pixel</MeasurementUnit></Description>"
        f"<Layout>{''.join(pages)}</Layout></alto>"
    ).encode("utf-8")


def pdf2xml_page(
    rows: Iterable[Tuple[str, str, str, str, str]] = (),
    *,
    number: Optional[str] = "1",
    width: Optional[str] = "800",
    height: Optional[str] = "1000",
) -> str:
    attributes = ['position="absolute"', 'top="0"', 'left="0"']
    for name, value in (("number", number), ("width", width), ("height", height)):
        if value is not None:
            attributes.append(f'{name}="{value}"')
    texts = "".join(
        f'<text top="{top}" left="{left}" width="{w}" height="{h}" font="0">{content}</text>\n'
        for content, top, left, w, h in rows
    )
    return f"<page {' '.join(attributes)}>\n{texts}</page>\n"


def pdf2xml_xml(*pages: str) -> bytes:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<!DOCTYPE pdf2xml SYSTEM "pdf2xml.dtd">\n\n'
        '<pdf2xml producer="poppler" version="22.02.0">\n'
        + "".join(pages)
        + "</pdf2xml>\n"
    ).encode("utf-8")


def write_png(path: Path, size: Tuple[int, int] = (800, 1000)) -> Path:
    Image.new("RGB", size, color=(255, 255, 255)).save(path, format="PNG")
    return path


class DocumentBuilder:
    """Collects media files for a document written below a temporary directory."""

    def __init__(self, root: Path, document_id: int = 7) -> None:
        self.root = root
        self.document_id = document_id
        self.media: List[Media] = []

    def _path(self, name: str) -> Path:
        directory = self.root / str(self.document_id)
        directory.mkdir(parents=True, exist_ok=True)
        return directory / name

    def add(self, name: str, content: bytes, media_type: str, media_data: Optional[Dict] = None) -> Media:
        path = self._path(name)
        path.write_bytes(content)
        media = Media(id=len(self.media) + 1, media_type=media_type, path=path, media_data=media_data or {})
        self.media.append(media)
        return media

    def alto(self, name: str, content: bytes) -> Media:
        return self.add(name, content, ALTO_MEDIA_TYPE)

    def pdf2xml(self, name: str, content: bytes) -> Media:
        return self.add(name, content, PDF2XML_MEDIA_TYPE)

    def image(self, name: str, width: int = 800, height: int = 1000) -> Media:
        path = write_png(self._path(name), (width, height))
        media = Media(id=len(self.media) + 1, media_type="image/png", path=path)
        self.media.append(media)
        return media

    def sized_image(self, width: int = 800, height: int = 1000) -> Media:
        media = Media(
            id=len(self.media) + 1,
            media_type="image/jpeg",
            media_data={"width": width, "height": height},
        )
        self.media.append(media)
        return media

    def build(self) -> Document:
        return Document(id=self.document_id, media=list(self.media))


@pytest.fixture()
def builder(tmp_path: Path) -> DocumentBuilder:
    return DocumentBuilder(tmp_path)


@pytest.fixture()
def settings(tmp_path: Path) -> SearchSettings:
    return SearchSettings(data_dir=tmp_path, base_url=BASE_URL)


@pytest.fixture()
def service(settings: SearchSettings) -> SearchService:
    return SearchService(settings)


@pytest.fixture()
def make_service() -> Callable[..., SearchService]:
    def _make(**overrides) -> SearchService:
        return SearchService(SearchSettings(base_url=BASE_URL, **overrides))

    return _make


def annotation_ids(resources: Sequence) -> List[str]:
    return [resource.id for resource in resources]
