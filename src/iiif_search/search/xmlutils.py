"""XML parsing helpers built on :mod:`xml.etree.ElementTree`."""
from __future__ import annotations

import io
import xml.etree.ElementTree as ET
from typing import Dict, Optional, Tuple


def parse_xml(content: bytes) -> Tuple[ET.Element, Dict[str, str]]:
    """Parse ``content`` and return its root with the declared namespaces.

    The namespace map is keyed by prefix (``""`` for the default namespace);
    the first declaration of a prefix wins. Raises ``ET.ParseError``, also
    when the declared encoding is unknown or not supported by expat.
    """

    namespaces: Dict[str, str] = {}
    root: Optional[ET.Element] = None
    try:
        for event, item in ET.iterparse(io.BytesIO(content), events=("start", "start-ns")):
            if event == "start-ns":
                prefix, uri = item
                namespaces.setdefault(prefix, uri)
            elif root is None:
                root = item
    except (ValueError, LookupError) as error:
        raise ET.ParseError(f"unsupported encoding: {error}") from error
    if root is None:
        raise ET.ParseError("no element found")
    return root, namespaces


def split_tag(tag: str) -> Tuple[str, str]:
    """Return ``(namespace, local_name)`` of an ElementTree tag."""

    if tag.startswith("{"):
        namespace, _, name = tag[1:].partition("}")
        return namespace, name
    return "", tag


def qualified(namespace: str, name: str) -> str:
    return f"{{{namespace}}}{name}" if namespace else name
