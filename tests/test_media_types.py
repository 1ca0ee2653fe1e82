from pathlib import Path

import pytest

from conftest import alto_page, alto_xml, pdf2xml_page, pdf2xml_xml
from iiif_search.media import XmlMediaTypeDetector, load_media_type_identifiers


@pytest.fixture()
def detector() -> XmlMediaTypeDetector:
    return XmlMediaTypeDetector(load_media_type_identifiers())


def _write(tmp_path: Path, name: str, content: bytes) -> Path:
    path = tmp_path / name
    path.write_bytes(content)
    return path


def test_alto_is_detected_from_its_namespace(tmp_path: Path, detector: XmlMediaTypeDetector) -> None:
    path = _write(tmp_path, "page.xml", alto_xml(alto_page()))

    assert detector.refine(path, "text/xml") == "application/alto+xml"
    assert detector(path, "application/xml") == "application/alto+xml"


def test_prefixed_alto_v3_is_detected(tmp_path: Path, detector: XmlMediaTypeDetector) -> None:
    content = alto_xml(alto_page(), namespace="http://www.loc.gov/standards/alto/ns-v3#", prefix="alto")
    path = _write(tmp_path, "page.xml", content)

    assert detector.refine(path, "text/xml") == "application/alto+xml"


def test_pdf2xml_is_detected_from_its_doctype(tmp_path: Path, detector: XmlMediaTypeDetector) -> None:
    path = _write(tmp_path, "book.xml", pdf2xml_xml(pdf2xml_page()))

    assert detector.refine(path, "text/xml") == "application/vnd.pdf2xml+xml"


def test_processing_instruction_href_is_used(tmp_path: Path, detector: XmlMediaTypeDetector) -> None:
    content = (
        b'<?xml version="1.0"?>\n'
        b'<?xml-stylesheet href="style.xsl" type="text/xsl"?>\n'
        b'<?xml-model href="http://www.tei-c.org/ns/1.0" type="application/xml"?>\n'
        b"<root/>"
    )
    path = _write(tmp_path, "doc.xml", content)

    assert detector.refine(path, "text/xml") == "application/tei+xml"


def test_unknown_xml_keeps_its_coarse_type(tmp_path: Path, detector: XmlMediaTypeDetector) -> None:
    path = _write(tmp_path, "notes.xml", b'<?xml version="1.0"?><notes xmlns="urn:example:notes"/>')

    assert detector.refine(path, "text/xml") == "text/xml"


def test_invalid_xml_keeps_its_coarse_type(tmp_path: Path, detector: XmlMediaTypeDetector) -> None:
    path = _write(tmp_path, "broken.xml", b"this is not xml")

    assert detector.refine(path, "application/xml") == "application/xml"


@pytest.mark.parametrize("encoding", ["GBK", "bogus"])
def test_xml_in_an_unsupported_encoding_keeps_its_coarse_type(
    tmp_path: Path, detector: XmlMediaTypeDetector, encoding: str
) -> None:
    path = _write(tmp_path, "notes.xml", f'<?xml version="1.0" encoding="{encoding}"?><alto/>'.encode())

    assert detector.refine(path, "text/xml") == "text/xml"


def test_coarse_type_is_guessed_from_the_name(tmp_path: Path, detector: XmlMediaTypeDetector) -> None:
    xml_path = _write(tmp_path, "page.xml", alto_xml(alto_page()))
    png_path = _write(tmp_path, "image.png", b"\x89PNG")

    assert detector.refine(xml_path) == "application/alto+xml"
    assert detector.refine(png_path) == "image/png"
    assert detector.refine(_write(tmp_path, "blob", b"data")) == "application/octet-stream"


def test_other_types_are_returned_unchanged(tmp_path: Path, detector: XmlMediaTypeDetector) -> None:
    path = _write(tmp_path, "page.jpg", b"jpeg")

    assert detector.refine(path, "image/jpeg") == "image/jpeg"


def test_zip_media_type_is_read_from_the_mimetype_entry(tmp_path: Path, detector: XmlMediaTypeDetector) -> None:
    media_type = b"application/vnd.oasis.opendocument.text"
    header = b"PK\x03\x04" + b"\x00" * 26 + b"mimetype" + media_type + b"PK\x03\x04" + b"\x00" * 40
    path = _write(tmp_path, "doc.odt", header)

    assert detector.refine(path, "application/zip") == media_type.decode()


def test_plain_zip_keeps_its_type(tmp_path: Path, detector: XmlMediaTypeDetector) -> None:
    path = _write(tmp_path, "archive.zip", b"PK\x03\x04" + b"\x00" * 100)

    assert detector.refine(path, "application/zip") == "application/zip"


def test_identifier_table_is_read_only() -> None:
    identifiers = load_media_type_identifiers()

    assert identifiers["pdf2xml"] == "application/vnd.pdf2xml+xml"
    with pytest.raises(TypeError):
        identifiers["pdf2xml"] = "text/plain"  # type: ignore[index]
    assert load_media_type_identifiers() is identifiers
