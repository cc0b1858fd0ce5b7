"""
Load books into the catalog from a JSON file

Usage:
    python -m bookcatalog.seed books.json

The file holds a list of objects shaped like ``schemas.BookSeed``.
Existing books with the same id are replaced.
"""

import argparse
import json
from pathlib import Path
from typing import Iterable, List

from sqlalchemy.orm import Session

from .config import settings
from .models import Book
from .schemas.book import BookSeed
from .utils.database import SessionLocal, init_db
from .utils.logging import setup_logging, get_logger

logger = get_logger(__name__)


def read_seed_file(path: Path) -> List[BookSeed]:
    """Parse and validate every entry of a seed file"""

    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a JSON list of books")

    return [BookSeed.model_validate(entry) for entry in raw]


def load_books(db: Session, entries: Iterable[BookSeed]) -> int:
    """
    Insert or replace books

    Args:
        db: Database session
        entries: Validated seed entries

    Returns:
        Number of books written
    """

    count = 0
    for entry in entries:
        data = entry.model_dump(exclude_none=True)
        book = db.get(Book, data["id"]) if "id" in data else None
        if book is None:
            book = Book()
            db.add(book)
        for field, value in data.items():
            setattr(book, field, value)
        count += 1

    db.commit()
    return count


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Load books into the catalog")
    parser.add_argument("path", type=Path, help="JSON file with a list of books")
    args = parser.parse_args(argv)

    setup_logging(log_level=settings.LOG_LEVEL)
    init_db()

    entries = read_seed_file(args.path)
    db = SessionLocal()
    try:
        written = load_books(db, entries)
    finally:
        db.close()

    logger.info("Catalog seeded", path=str(args.path), books=written)


if __name__ == "__main__":
    main()
