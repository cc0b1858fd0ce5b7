"""Pydantic schemas for request/response validation"""

from .book import BookResponse, ScoredBookResponse, HomepageFeedResponse, BookSeed
from .search import QuerySpecification, SortKey

__all__ = [
    "BookResponse",
    "ScoredBookResponse",
    "HomepageFeedResponse",
    "BookSeed",
    "QuerySpecification",
    "SortKey",
]
