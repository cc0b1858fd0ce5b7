"""Catalog services"""

from .catalog import CatalogService
from .feed import FeedService
from .search import SearchService
from .similarity import SimilarityService, ScoredBook, weighted_attribute_score

__all__ = [
    "CatalogService",
    "FeedService",
    "SearchService",
    "SimilarityService",
    "ScoredBook",
    "weighted_attribute_score",
]
