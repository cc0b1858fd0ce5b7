"""Database models"""

from .base import Base
from .book import Book, BookGenre, BookTag

__all__ = [
    "Base",
    "Book",
    "BookGenre",
    "BookTag",
]
