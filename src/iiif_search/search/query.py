"""Normalisation of free-text queries into regex-safe search terms."""
from __future__ import annotations

import re
import unicodedata
from typing import List

_WHITESPACE_RE = re.compile(r"\s+")
_KEPT_CATEGORIES = ("L", "N", "S")

DEFAULT_MINIMUM_QUERY_LENGTH = 3


def clean_query(query: str) -> str:
    """Keep only letters, numbers and symbols, separated by single spaces."""

    kept = "".join(
        char if unicodedata.category(char)[0] in _KEPT_CATEGORIES else " " for char in str(query)
    )
    return _WHITESPACE_RE.sub(" ", kept).strip()


def normalize(query: str, minimum_length: int = DEFAULT_MINIMUM_QUERY_LENGTH) -> List[str]:
    """Return the escaped terms to search for, or an empty list.

    Short words are dropped from multi-word queries because OCR text is
    tokenized word by word. When several words remain, the whole phrase is
    added as a last term. The same word may be listed several times.
    """

    cleaned = clean_query(query)
    if len(cleaned) < minimum_length:
        return []

    words = cleaned.split(" ")
    if len(words) == 1:
        return [re.escape(words[0])]

    terms = [re.escape(word) for word in words if len(word) >= minimum_length]
    if len(terms) > 1:
        terms.append(re.escape(" ".join(words)))
    return terms
