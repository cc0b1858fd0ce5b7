"""Database connection and session management"""

from contextlib import contextmanager
from sqlalchemy import create_engine, event
from sqlalchemy.exc import DisconnectionError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator, Iterator, Optional

from ..config import settings
from ..exceptions import StoreUnavailableError
from ..models.base import Base
from .logging import get_logger

logger = get_logger(__name__)


def _engine_options(url: str) -> dict:
    """Pool options for the configured backend; SQLite manages its own pool"""

    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    return {
        "pool_pre_ping": True,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
    }


SQLITE_CASEFOLD = "casefold"


def _casefold(value: Optional[str]) -> Optional[str]:
    return str(value).casefold() if value is not None else None


def install_sqlite_functions(engine) -> None:
    """
    Register Unicode case folding on every new SQLite connection

    SQLite's own lower() and LIKE only fold ASCII letters.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _register(dbapi_connection, connection_record):
        dbapi_connection.create_function(SQLITE_CASEFOLD, 1, _casefold)


# Create database engine
engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))
install_sqlite_functions(engine)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI

    Yields a database session and ensures it's closed after use.
    """

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Initialize database tables

    Creates all tables defined in models.
    """

    # Import all models to ensure they're registered
    from ..models import Book, BookGenre, BookTag  # noqa: F401

    Base.metadata.create_all(bind=engine)


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """
    Translate connectivity failures into StoreUnavailableError

    Usage:
        with store_errors("search"):
            rows = query.all()
    """
    try:
        yield
    except (OperationalError, DisconnectionError, PoolTimeoutError) as e:
        logger.error("Catalog store unavailable", operation=operation, error=str(e))
        raise StoreUnavailableError(f"Catalog store unavailable during {operation}") from e
