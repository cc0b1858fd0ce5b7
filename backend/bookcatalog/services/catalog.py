"""Book lookup and distinct label listings"""

from typing import List
from sqlalchemy.orm import Session

from ..exceptions import BookNotFoundError
from ..models import Book, BookGenre, BookTag
from ..utils.database import store_errors


class CatalogService:
    """Read-only catalog lookups"""

    def __init__(self, db: Session):
        self.db = db

    def get_book(self, book_id: str) -> Book:
        with store_errors("get_book"):
            book = self.db.query(Book).filter(Book.id == book_id).first()
        if book is None:
            raise BookNotFoundError(book_id)
        return book

    def list_genres(self) -> List[str]:
        """All genres present in the catalog, deduplicated and sorted"""
        with store_errors("list_genres"):
            rows = self.db.query(BookGenre.name).distinct().order_by(BookGenre.name.asc()).all()
        return [name for (name,) in rows]

    def list_tags(self) -> List[str]:
        """All tags present in the catalog, deduplicated and sorted"""
        with store_errors("list_tags"):
            rows = self.db.query(BookTag.name).distinct().order_by(BookTag.name.asc()).all()
        return [name for (name,) in rows]
