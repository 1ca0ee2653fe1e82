"""Helpers that inspect stored files: media types, encodings and image sizes."""
from __future__ import annotations

from .encoding import repair_encoding
from .images import read_image_dimensions
from .media_types import XmlMediaTypeDetector, load_media_type_identifiers

__all__ = [
    "XmlMediaTypeDetector",
    "load_media_type_identifiers",
    "read_image_dimensions",
    "repair_encoding",
]
