"""Tests for search request parsing"""

import pytest
from pydantic import ValidationError

from bookcatalog.config import settings
from bookcatalog.schemas.search import MAX_OFFSET, QuerySpecification, SortKey


def test_defaults():
    """An empty request parses to an empty specification"""

    spec = QuerySpecification.from_params()

    assert spec.text is None
    assert spec.genre is None
    assert spec.min_rating is None
    assert spec.sort is None
    assert spec.page == 1
    assert spec.per_page == settings.SEARCH_PAGE_SIZE == 25
    assert not spec.has_filters


def test_blank_values_are_absent():
    """Whitespace-only parameters count as missing"""

    spec = QuerySpecification.from_params(query="   ", genre="", rating=" ", sort="")

    assert not spec.has_filters
    assert spec.sort is None


def test_text_is_stripped():
    spec = QuerySpecification.from_params(query="  dune ")
    assert spec.text == "dune"
    assert spec.has_filters


@pytest.mark.parametrize("raw", ["abc", "-1", "nan", "inf", "4,5"])
def test_unusable_rating_is_ignored(raw):
    """Unparsable or negative ratings are dropped instead of rejected"""

    spec = QuerySpecification.from_params(rating=raw)
    assert spec.min_rating is None


def test_rating_is_parsed():
    spec = QuerySpecification.from_params(rating="3.5")
    assert spec.min_rating == 3.5
    assert spec.has_filters


def test_zero_rating_is_a_filter():
    spec = QuerySpecification.from_params(rating="0")
    assert spec.min_rating == 0.0
    assert spec.has_filters


@pytest.mark.parametrize("raw,expected", [("0", 1), ("-4", 1), ("x", 1), ("2", 2), (None, 1), (" 3 ", 3)])
def test_page_is_clamped(raw, expected):
    """Invalid page numbers fall back to the first page"""

    spec = QuerySpecification.from_params(query="a", page=raw)
    assert spec.page == expected


def test_sort_key_parsing():
    assert QuerySpecification.from_params(sort="popularity").sort == SortKey.POPULARITY
    assert QuerySpecification.from_params(sort="rating").sort == SortKey.RATING
    assert QuerySpecification.from_params(sort="title").sort == SortKey.TITLE
    assert QuerySpecification.from_params(sort="newest").sort is None


def test_sort_alone_is_not_a_filter():
    spec = QuerySpecification.from_params(sort="rating")
    assert not spec.has_filters


def test_tag_counts_as_filter():
    spec = QuerySpecification.from_params(tag="dragons")
    assert spec.has_filters


def test_offset():
    spec = QuerySpecification.from_params(query="a", page="3")
    assert spec.offset == 50


def test_specification_is_immutable():
    spec = QuerySpecification.from_params(query="dune")

    with pytest.raises(ValidationError):
        spec.text = "other"


def test_huge_page_is_clamped_to_largest_offset():
    """The resulting OFFSET always fits a signed 64-bit integer"""

    spec = QuerySpecification.from_params(query="a", page="99999999999999999999")

    assert spec.page == MAX_OFFSET // spec.per_page
    assert spec.offset <= MAX_OFFSET
