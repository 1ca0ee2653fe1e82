import re

import pytest

from iiif_search.search.query import clean_query, normalize


def test_single_word_is_escaped() -> None:
    assert normalize("cat") == ["cat"]
    assert normalize("C++") == [re.escape("C++")]


def test_query_shorter_than_minimum_is_not_searched() -> None:
    assert normalize("a") == []
    assert normalize("ab") == []
    assert normalize("  !!  ") == []
    assert normalize("") == []


def test_punctuation_is_removed_and_spaces_collapsed() -> None:
    assert clean_query("  l'été,   au   bord!  ") == "l été au bord"
    assert clean_query("x\t\ny") == "x y"


def test_symbols_and_numbers_are_kept() -> None:
    assert clean_query("1789 + €") == "1789 + €"


def test_short_words_are_dropped_from_multi_word_queries() -> None:
    assert normalize("a cat") == ["cat"]
    assert normalize("a b") == []


def test_phrase_is_added_when_several_words_remain() -> None:
    terms = normalize("black cat of the house")

    assert terms == ["black", "cat", "the", "house", re.escape("black cat of the house")]


def test_repeated_words_are_kept() -> None:
    assert normalize("cat cat") == ["cat", "cat", re.escape("cat cat")]


def test_minimum_length_is_configurable() -> None:
    assert normalize("ox", minimum_length=2) == ["ox"]
    assert normalize("cats", minimum_length=5) == []
    assert normalize("an ox and cow", minimum_length=2) == [
        "an",
        "ox",
        "and",
        "cow",
        re.escape("an ox and cow"),
    ]


def test_length_is_counted_in_code_points() -> None:
    assert normalize("été") == ["été"]


@pytest.mark.parametrize(
    "query",
    ["cat", "  The  black (cat)! ", "l'été", "a", "C++ & co", "naïve café 1789", "«quoted» — text"],
)
def test_normalizing_a_cleaned_query_gives_the_same_terms(query: str) -> None:
    assert normalize(clean_query(query)) == normalize(query)
