"""Image header probing with Pillow."""
from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from iiif_search.search.models import ImageSize

LOGGER = logging.getLogger(__name__)


def read_image_dimensions(path: str | Path) -> ImageSize:
    """Return the pixel size of an image, or ``ImageSize(0, 0)`` if unreadable."""

    try:
        with Image.open(path) as image:
            width, height = image.size
    except (OSError, UnidentifiedImageError, ValueError) as error:
        LOGGER.warning("Unable to read image size of %s: %s", path, error)
        return ImageSize(width=0, height=0)
    return ImageSize(width=int(width), height=int(height))
