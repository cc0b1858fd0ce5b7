"""Faceted book search: free text, genre, rating and tag filters with sorting"""

from typing import Optional
from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from ..models import Book, BookGenre, BookTag
from ..schemas.search import QuerySpecification, SortKey
from ..utils.database import store_errors
from ..utils.logging import get_logger
from ..utils.metrics import record_search, track_operation_time
from .pagination import Page, paginate

logger = get_logger(__name__)

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so ``term`` matches literally"""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class SearchService:
    """
    Translates a QuerySpecification into one composed catalog query

    Filters narrow the candidate set conjunctively in a fixed order
    (text, genre, minimum rating, tag). Sorting is applied afterwards
    with the book id as the final tiebreaker so identical requests
    return identical pages.
    """

    def __init__(self, db: Session):
        self.db = db

    @track_operation_time("search")
    def search(self, spec: QuerySpecification) -> Page[Book]:
        """
        Run a search

        Args:
            spec: Parsed search request

        Returns:
            Page of matching books
        """

        # A request with no narrowing filter never scans the catalog
        if not spec.has_filters:
            logger.info("Search without filters, returning empty page", sort=_sort_label(spec.sort))
            record_search(_sort_label(spec.sort), "guarded")
            return Page.empty(spec.page, spec.per_page)

        with store_errors("search"):
            query = self.build_query(spec)
            page = paginate(query, spec.page, spec.per_page)

        logger.info(
            "Search completed",
            text=spec.text,
            genre=spec.genre,
            tag=spec.tag,
            min_rating=spec.min_rating,
            sort=_sort_label(spec.sort),
            page=page.page,
            total=page.total
        )
        record_search(_sort_label(spec.sort), "results" if page.total else "empty", page.total)

        return page

    def build_query(self, spec: QuerySpecification) -> Query:
        """Compose filters and ordering for ``spec`` without executing"""

        query = self.db.query(Book)

        if spec.text is not None:
            use_casefold = self.db.get_bind().dialect.name == "sqlite"
            query = query.filter(or_(*(
                _contains_text(column, spec.text, use_casefold)
                for column in (Book.title, Book.author, Book.isbn, Book.description)
            )))

        if spec.genre is not None:
            query = query.filter(Book.genre_links.any(BookGenre.name == spec.genre))

        if spec.min_rating is not None:
            # Unrated books never satisfy a rating filter
            query = query.filter(
                Book.average_rating.isnot(None),
                Book.average_rating >= spec.min_rating
            )

        if spec.tag is not None:
            query = query.filter(Book.tag_links.any(BookTag.name == spec.tag))

        return query.order_by(*_ordering(spec.sort))


def _contains_text(column, term: str, use_casefold: bool):
    """
    Case-insensitive literal substring match on ``column``

    SQLite only folds ASCII, so there both sides go through the
    registered casefold function; other backends use ILIKE.
    """
    if use_casefold:
        pattern = f"%{escape_like(term.casefold())}%"
        return func.casefold(column).like(pattern, escape=LIKE_ESCAPE)

    pattern = f"%{escape_like(term)}%"
    return column.ilike(pattern, escape=LIKE_ESCAPE)


def _ordering(sort: Optional[SortKey]) -> list:
    if sort == SortKey.POPULARITY:
        return [Book.ratings_count.desc(), Book.id.asc()]
    if sort == SortKey.RATING:
        return [Book.average_rating.is_(None), Book.average_rating.desc(), Book.id.asc()]
    if sort == SortKey.TITLE:
        return [Book.title.asc(), Book.id.asc()]
    # Natural order: insertion time
    return [Book.created_at.asc(), Book.id.asc()]


def _sort_label(sort: Optional[SortKey]) -> str:
    return sort.value if sort is not None else "natural"
