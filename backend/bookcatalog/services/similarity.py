"""Content-based similar books ranked by shared attributes"""

from typing import Callable, List, NamedTuple, Optional
from sqlalchemy.orm import Session

from ..config import settings
from ..exceptions import BookNotFoundError
from ..models import Book, BookGenre
from ..utils.database import store_errors
from ..utils.logging import get_logger
from ..utils.metrics import record_similarity, track_operation_time

logger = get_logger(__name__)

# Scores a candidate against the reference book; higher is more similar
SimilarityScorer = Callable[[Book, Book], float]


class ScoredBook(NamedTuple):
    """A candidate book and the score it was ranked by"""

    book: Book
    score: float


def make_weighted_scorer(
    genre_weight: float = 5.0,
    author_weight: float = 25.0,
    rating_weight: float = 1.0
) -> SimilarityScorer:
    """
    Build a linear scorer over explicit attributes

    score = genre_weight * shared genres
          + author_weight if the authors are equal
          + rating_weight * average rating (0 when unrated)
    """

    def score(candidate: Book, reference: Book) -> float:
        shared_genres = len(set(candidate.genres) & set(reference.genres))
        same_author = candidate.author == reference.author
        rating = candidate.average_rating or 0.0
        return (
            genre_weight * shared_genres
            + (author_weight if same_author else 0.0)
            + rating_weight * rating
        )

    return score


weighted_attribute_score = make_weighted_scorer(
    genre_weight=settings.SIMILAR_GENRE_WEIGHT,
    author_weight=settings.SIMILAR_AUTHOR_WEIGHT,
    rating_weight=settings.SIMILAR_RATING_WEIGHT
)


class SimilarityService:
    """
    Similar-book recommendations

    Candidates are books sharing at least one genre with the reference;
    each is scored by a pluggable scorer and the best ``top_k`` are
    returned, score descending then id ascending.
    """

    def __init__(
        self,
        db: Session,
        scorer: Optional[SimilarityScorer] = None,
        top_k: int = settings.SIMILAR_TOP_K
    ):
        self.db = db
        self.scorer = scorer or weighted_attribute_score
        self.top_k = top_k

    @track_operation_time("similar_books")
    def similar(self, book_id: str) -> List[ScoredBook]:
        """
        Rank books similar to ``book_id``

        Args:
            book_id: Reference book id

        Returns:
            Up to top_k scored books

        Raises:
            BookNotFoundError: If the reference book does not exist
        """

        with store_errors("similar_books"):
            reference = self.db.query(Book).filter(Book.id == book_id).first()
            if reference is None:
                raise BookNotFoundError(book_id)

            reference_genres = reference.genres
            if not reference_genres or not (reference.author or "").strip():
                logger.info("Not enough signal for similar books", book_id=book_id)
                record_similarity("insufficient_signal")
                return []

            candidates = self.candidates(reference, reference_genres)

        ranked = sorted(
            (ScoredBook(book=candidate, score=self.scorer(candidate, reference)) for candidate in candidates),
            key=lambda scored: (-scored.score, scored.book.id)
        )[:self.top_k]

        logger.info(
            "Similar books ranked",
            book_id=book_id,
            candidates=len(candidates),
            returned=len(ranked)
        )
        record_similarity("ranked")

        return ranked

    def candidates(self, reference: Book, genres: List[str]) -> List[Book]:
        """Books sharing at least one genre with ``reference``, excluding itself"""

        return (
            self.db.query(Book)
            .filter(
                Book.genre_links.any(BookGenre.name.in_(genres)),
                Book.id != reference.id
            )
            .all()
        )
