"""Settings read from environment variables."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from iiif_search.search.query import DEFAULT_MINIMUM_QUERY_LENGTH

LOGGER = logging.getLogger(__name__)

DEFAULT_DATA_DIR = "data"
DEFAULT_BASE_URL = "http://localhost:8000/iiif"


def _int_from_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        LOGGER.warning("Invalid integer for %s: %s; using default %s", name, value, default)
        return default


@dataclass(frozen=True, slots=True)
class SearchSettings:
    minimum_query_length: int = DEFAULT_MINIMUM_QUERY_LENGTH
    data_dir: Path = Path(DEFAULT_DATA_DIR)
    base_url: str = DEFAULT_BASE_URL
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "SearchSettings":
        return cls(
            minimum_query_length=_int_from_env(
                "IIIF_SEARCH_MINIMUM_QUERY_LENGTH", DEFAULT_MINIMUM_QUERY_LENGTH
            ),
            data_dir=Path(os.getenv("IIIF_SEARCH_DATA_DIR", DEFAULT_DATA_DIR)),
            base_url=os.getenv("IIIF_SEARCH_BASE_URL", DEFAULT_BASE_URL),
            log_level=os.getenv("IIIF_SEARCH_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )


@lru_cache()
def get_settings() -> SearchSettings:
    """Return the settings of the running process."""

    return SearchSettings.from_env()
