"""Book catalog API endpoints"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional, Union

from ..exceptions import BookNotFoundError
from ..schemas.book import BookResponse, HomepageFeedResponse, ScoredBookResponse
from ..schemas.search import QuerySpecification
from ..services.catalog import CatalogService
from ..services.feed import FeedService
from ..services.pagination import apply_pagination_headers
from ..services.search import SearchService
from ..services.similarity import SimilarityService
from ..utils.database import get_db

router = APIRouter()


def _feed_response(db: Session) -> HomepageFeedResponse:
    feed = FeedService(db).homepage_feed()
    return HomepageFeedResponse(
        feed={
            label: [BookResponse.model_validate(book) for book in books]
            for label, books in feed.items()
        }
    )


def _search_response(spec: QuerySpecification, response: Response, db: Session) -> List[BookResponse]:
    page = SearchService(db).search(spec)
    apply_pagination_headers(response, page)
    return [BookResponse.model_validate(book) for book in page.items]


@router.get("/books", response_model=Union[HomepageFeedResponse, List[BookResponse]])
def list_books(
    response: Response,
    query: Optional[str] = Query(None, description="Text matched against title, author, ISBN and description"),
    genre: Optional[str] = Query(None, description="Exact genre label"),
    rating: Optional[str] = Query(None, description="Minimum average rating"),
    sort: Optional[str] = Query(None, description="popularity, rating or title"),
    page: Optional[str] = Query(None, description="1-indexed page number"),
    db: Session = Depends(get_db)
):
    """
    Browse the catalog

    Without any search parameter this returns the homepage feed;
    otherwise it behaves like ``/search``.
    """

    if not any(value and value.strip() for value in (query, genre, rating, sort)):
        return _feed_response(db)

    spec = QuerySpecification.from_params(query=query, genre=genre, rating=rating, sort=sort, page=page)
    return _search_response(spec, response, db)


@router.get("/search", response_model=List[BookResponse])
def search_books(
    response: Response,
    query: Optional[str] = Query(None, description="Text matched against title, author, ISBN and description"),
    genre: Optional[str] = Query(None, description="Exact genre label"),
    rating: Optional[str] = Query(None, description="Minimum average rating"),
    sort: Optional[str] = Query(None, description="popularity, rating or title"),
    page: Optional[str] = Query(None, description="1-indexed page number"),
    db: Session = Depends(get_db)
):
    """
    Search books

    Pagination metadata is returned in the X-Total-Count, X-Per-Page,
    X-Page and X-Total-Pages headers. A request without text, genre or
    rating returns an empty list.
    """

    spec = QuerySpecification.from_params(query=query, genre=genre, rating=rating, sort=sort, page=page)
    return _search_response(spec, response, db)


@router.get("/homepage_feed", response_model=HomepageFeedResponse)
def homepage_feed(db: Session = Depends(get_db)):
    """Top genres with their most-rated books"""

    return _feed_response(db)


@router.get("/books/tags/{tag}", response_model=List[BookResponse])
def search_books_by_tag(
    tag: str,
    response: Response,
    sort: Optional[str] = Query(None, description="popularity, rating or title"),
    page: Optional[str] = Query(None, description="1-indexed page number"),
    db: Session = Depends(get_db)
):
    """Books carrying an exact tag"""

    spec = QuerySpecification.from_params(tag=tag, sort=sort, page=page)
    return _search_response(spec, response, db)


@router.get("/books/{book_id}", response_model=BookResponse)
def get_book(book_id: str, db: Session = Depends(get_db)):
    """Get a specific book"""

    try:
        return CatalogService(db).get_book(book_id)
    except BookNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found"
        )


@router.get("/books/{book_id}/similar", response_model=List[ScoredBookResponse])
def similar_books(book_id: str, db: Session = Depends(get_db)):
    """Books sharing genres and author with the given book, best match first"""

    try:
        ranked = SimilarityService(db).similar(book_id)
    except BookNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found"
        )

    return [
        ScoredBookResponse(**BookResponse.model_validate(scored.book).model_dump(), score=scored.score)
        for scored in ranked
    ]


@router.get("/genres", response_model=List[str])
def list_genres(db: Session = Depends(get_db)):
    """All genres in the catalog, sorted"""

    return CatalogService(db).list_genres()


@router.get("/all_tags", response_model=List[str])
def list_tags(db: Session = Depends(get_db)):
    """All tags in the catalog, sorted"""

    return CatalogService(db).list_tags()
