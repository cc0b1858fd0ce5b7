"""Prometheus metrics configuration"""

from prometheus_client import Counter, Histogram, Info
from prometheus_fastapi_instrumentator import Instrumentator
from typing import Callable
import time
from functools import wraps

from ..config import settings

# Application info
app_info = Info('book_catalog', 'Book Catalog Information')
app_info.info({
    'version': settings.VERSION,
    'service': 'book-catalog'
})

# Search metrics
catalog_searches_total = Counter(
    'catalog_searches_total',
    'Total search requests by outcome',
    ['sort', 'outcome']  # outcome: results, empty, guarded
)

catalog_search_results = Histogram(
    'catalog_search_results',
    'Number of books matching a search',
    buckets=(0, 1, 5, 10, 25, 50, 100, 250, 1000)
)

# Feed metrics
homepage_feeds_total = Counter(
    'homepage_feeds_total',
    'Total homepage feeds built',
    ['shape']  # genres or fallback
)

# Similarity metrics
similar_books_total = Counter(
    'similar_books_total',
    'Total similar-book computations by outcome',
    ['outcome']  # ranked or insufficient_signal
)

# Operation timing
catalog_operation_duration_seconds = Histogram(
    'catalog_operation_duration_seconds',
    'Time taken by catalog read operations',
    ['operation']
)


def setup_metrics(app):
    """
    Setup Prometheus metrics for FastAPI app

    Args:
        app: FastAPI application instance
    """
    instrumentator = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        should_respect_env_var=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/metrics"],
        env_var_name="ENABLE_METRICS",
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True
    )

    instrumentator.instrument(app).expose(app, endpoint="/metrics")

    return instrumentator


def track_operation_time(operation: str):
    """
    Decorator to track how long a catalog operation takes

    Usage:
        @track_operation_time("search")
        def search(self, spec):
            pass
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return func(*args, **kwargs)
            finally:
                catalog_operation_duration_seconds.labels(
                    operation=operation
                ).observe(time.time() - start_time)

        return wrapper

    return decorator


def record_search(sort: str, outcome: str, total: int = 0):
    """Record a search and its match count"""
    catalog_searches_total.labels(sort=sort, outcome=outcome).inc()
    if outcome != "guarded":
        catalog_search_results.observe(total)


def record_feed(shape: str):
    """Record homepage feed generation"""
    homepage_feeds_total.labels(shape=shape).inc()


def record_similarity(outcome: str):
    """Record a similar-books computation"""
    similar_books_total.labels(outcome=outcome).inc()
