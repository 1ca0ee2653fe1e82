"""Best-effort conversion of XML bytes to UTF-8."""
from __future__ import annotations

import codecs
import logging
import re

LOGGER = logging.getLogger(__name__)

_XML_DECLARATION_ENCODING_RE = re.compile(
    rb"""^(<\?xml[^>]*?encoding\s*=\s*)(["'])[^"']*\2""", re.IGNORECASE
)


def repair_encoding(content: bytes) -> bytes:
    """Return ``content`` as UTF-8 bytes.

    Valid UTF-8 is returned unchanged apart from a leading byte order mark.
    Anything else is read as cp1252, or latin-1 when cp1252 has undefined
    bytes, and the encoding of the XML declaration is updated.
    """

    if content.startswith(codecs.BOM_UTF8):
        content = content[len(codecs.BOM_UTF8):]
    try:
        content.decode("utf-8")
        return content
    except UnicodeDecodeError:
        pass

    try:
        text = content.decode("cp1252")
        source = "cp1252"
    except UnicodeDecodeError:
        text = content.decode("latin-1")
        source = "latin-1"
    LOGGER.info("Converted XML content from %s to utf-8", source)

    repaired = text.encode("utf-8")
    return _XML_DECLARATION_ENCODING_RE.sub(rb"\1\2UTF-8\2", repaired, count=1)
