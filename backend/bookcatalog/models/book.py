"""Book model and its genre/tag label tables"""

import uuid
from typing import Iterable, List

from sqlalchemy import Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


def _new_book_id() -> str:
    return uuid.uuid4().hex


def _unique_labels(labels: Iterable[str]) -> List[str]:
    seen = []
    for label in labels or []:
        if label and label not in seen:
            seen.append(label)
    return seen


class BookGenre(Base):
    """One row per (book, genre); a book contributes to every genre it carries"""

    __tablename__ = "book_genres"

    book_id = Column(String(64), ForeignKey("books.id", ondelete="CASCADE"), primary_key=True)
    name = Column(String(100), primary_key=True, index=True)

    def __repr__(self):
        return f"<BookGenre(book_id='{self.book_id}', name='{self.name}')>"


class BookTag(Base):
    """One row per (book, tag)"""

    __tablename__ = "book_tags"

    book_id = Column(String(64), ForeignKey("books.id", ondelete="CASCADE"), primary_key=True)
    name = Column(String(100), primary_key=True, index=True)

    def __repr__(self):
        return f"<BookTag(book_id='{self.book_id}', name='{self.name}')>"


class Book(Base, TimestampMixin):
    """Book table for the catalog"""

    __tablename__ = "books"

    id = Column(String(64), primary_key=True, default=_new_book_id)
    title = Column(String(500), nullable=False, index=True)
    author = Column(String(255), index=True)
    isbn = Column(String(32))
    description = Column(Text)
    cover_image_url = Column(String(1000))
    average_rating = Column(Float)  # None when the book has never been rated
    ratings_count = Column(Integer, default=0, nullable=False)

    # Relationships
    genre_links = relationship(BookGenre, cascade="all, delete-orphan", lazy="selectin")
    tag_links = relationship(BookTag, cascade="all, delete-orphan", lazy="selectin")

    @property
    def genres(self) -> List[str]:
        return sorted(link.name for link in self.genre_links)

    @genres.setter
    def genres(self, names: Iterable[str]) -> None:
        self.genre_links = [BookGenre(name=name) for name in _unique_labels(names)]

    @property
    def tags(self) -> List[str]:
        return sorted(link.name for link in self.tag_links)

    @tags.setter
    def tags(self, names: Iterable[str]) -> None:
        self.tag_links = [BookTag(name=name) for name in _unique_labels(names)]

    def __repr__(self):
        return f"<Book(id='{self.id}', title='{self.title}')>"
