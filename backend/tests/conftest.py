"""Shared fixtures for the catalog tests"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from bookcatalog.models import Base, Book  # noqa: E402
from bookcatalog.utils.database import install_sqlite_functions  # noqa: E402

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def engine():
    """In-memory SQLite shared across threads"""

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    install_sqlite_functions(engine)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Create a test database session"""

    TestingSessionLocal = sessionmaker(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()


@pytest.fixture
def make_book(db_session):
    """
    Factory adding a book to the session

    Books get increasing created_at values in creation order unless one
    is given explicitly.
    """
    counter = {"n": 0}

    def _make_book(id, title="Untitled", **fields):
        fields.setdefault("created_at", BASE_TIME + timedelta(minutes=counter["n"]))
        counter["n"] += 1
        book = Book(id=id, title=title, **fields)
        db_session.add(book)
        db_session.commit()
        return book

    return _make_book
