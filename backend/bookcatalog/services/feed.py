"""Homepage feed: most populous genres with a recency fallback"""

from collections import OrderedDict
from typing import Dict, List, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..config import settings
from ..models import Book, BookGenre
from ..utils.database import store_errors
from ..utils.logging import get_logger
from ..utils.metrics import record_feed, track_operation_time

logger = get_logger(__name__)

Feed = Dict[str, List[Book]]


class FeedService:
    """
    Builds the homepage feed

    Groups the catalog by genre, keeps the genres carrying the most
    books and lists the most-rated books of each. A catalog without any
    genre yields a single "recently added" group instead.
    """

    def __init__(
        self,
        db: Session,
        top_genres: int = settings.FEED_TOP_GENRES,
        books_per_genre: int = settings.FEED_BOOKS_PER_GENRE,
        fallback_label: str = settings.FEED_FALLBACK_LABEL
    ):
        self.db = db
        self.top_genres = top_genres
        self.books_per_genre = books_per_genre
        self.fallback_label = fallback_label

    @track_operation_time("homepage_feed")
    def homepage_feed(self) -> Feed:
        """
        Build the feed

        Returns:
            Ordered mapping of group label to books
        """

        with store_errors("homepage_feed"):
            genre_counts = self.genre_counts()

            if not genre_counts:
                feed = OrderedDict([(self.fallback_label, self.recently_added())])
                logger.info("Homepage feed built from recent books", books=len(feed[self.fallback_label]))
                record_feed("fallback")
                return feed

            # Counts may be slightly stale by the time books are fetched
            feed = OrderedDict(
                (genre, self.top_books_in_genre(genre)) for genre, _ in genre_counts
            )

        logger.info("Homepage feed built", genres=list(feed.keys()))
        record_feed("genres")
        return feed

    def genre_counts(self) -> List[Tuple[str, int]]:
        """
        Count books per genre, most populous first

        A book with several genres counts once toward each of them.
        Ties are broken by genre label so the selection is stable.
        """

        count = func.count(BookGenre.book_id).label("book_count")
        rows = (
            self.db.query(BookGenre.name, count)
            .group_by(BookGenre.name)
            .order_by(count.desc(), BookGenre.name.asc())
            .limit(self.top_genres)
            .all()
        )
        return [(name, book_count) for name, book_count in rows]

    def top_books_in_genre(self, genre: str) -> List[Book]:
        """Most-rated books carrying ``genre``"""

        return (
            self.db.query(Book)
            .filter(Book.genre_links.any(BookGenre.name == genre))
            .order_by(Book.ratings_count.desc(), Book.id.asc())
            .limit(self.books_per_genre)
            .all()
        )

    def recently_added(self) -> List[Book]:
        """Newest books first"""

        return (
            self.db.query(Book)
            .order_by(Book.created_at.desc(), Book.id.asc())
            .limit(self.books_per_genre)
            .all()
        )
