"""Search request schemas"""

import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from ..config import settings
from ..utils.logging import get_logger

logger = get_logger(__name__)

MAX_OFFSET = 2 ** 63 - 1


class SortKey(str, Enum):
    """Sort orders accepted by search"""

    POPULARITY = "popularity"  # ratings_count desc
    RATING = "rating"          # average_rating desc, unrated last
    TITLE = "title"            # title asc, binary collation


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_min_rating(raw: Optional[str]) -> Optional[float]:
    raw = _blank_to_none(raw)
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.debug("Ignoring unparsable rating filter", rating=raw)
        return None
    if not math.isfinite(value) or value < 0:
        logger.debug("Ignoring out of range rating filter", rating=raw)
        return None
    return value


def _parse_sort(raw: Optional[str]) -> Optional[SortKey]:
    raw = _blank_to_none(raw)
    if raw is None:
        return None
    try:
        return SortKey(raw)
    except ValueError:
        logger.debug("Ignoring unknown sort key", sort=raw)
        return None


def _parse_page(raw, per_page: int) -> int:
    if raw is None:
        return 1
    try:
        page = int(str(raw).strip())
    except ValueError:
        return 1
    # OFFSET must fit a signed 64-bit integer
    last_page = MAX_OFFSET // per_page
    if page > last_page:
        logger.debug("Clamping page number", page=raw, last_page=last_page)
        return last_page
    return max(page, 1)


class QuerySpecification(BaseModel):
    """
    Parsed form of one search request

    Built once per request through ``from_params`` and never mutated.
    Every field is optional; an unparsable rating or sort key is treated
    as absent and a bad page number is clamped to 1.
    """

    text: Optional[str] = None
    genre: Optional[str] = None
    tag: Optional[str] = None
    min_rating: Optional[float] = Field(None, ge=0.0)
    sort: Optional[SortKey] = None
    page: int = Field(1, ge=1)
    per_page: int = Field(default_factory=lambda: settings.SEARCH_PAGE_SIZE, ge=1)

    class Config:
        frozen = True

    @classmethod
    def from_params(
        cls,
        query: Optional[str] = None,
        genre: Optional[str] = None,
        rating: Optional[str] = None,
        sort: Optional[str] = None,
        page=None,
        tag: Optional[str] = None,
    ) -> "QuerySpecification":
        """Build a specification from raw request parameters"""

        per_page = settings.SEARCH_PAGE_SIZE
        return cls(
            text=_blank_to_none(query),
            genre=_blank_to_none(genre),
            tag=_blank_to_none(tag),
            min_rating=_parse_min_rating(rating),
            sort=_parse_sort(sort),
            page=_parse_page(page, per_page),
            per_page=per_page,
        )

    @property
    def has_filters(self) -> bool:
        """True when at least one narrowing filter is present; sort alone is not a filter"""
        return any(
            value is not None
            for value in (self.text, self.genre, self.min_rating, self.tag)
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page
