"""Full-text search inside OCR transcriptions with IIIF Search API results."""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
