"""Domain exceptions raised by the catalog services"""


class CatalogError(Exception):
    """Base class for catalog errors"""


class BookNotFoundError(CatalogError):
    """Raised when a book lookup by id misses"""

    def __init__(self, book_id: str):
        self.book_id = book_id
        super().__init__(f"Book not found: {book_id}")


class StoreUnavailableError(CatalogError):
    """
    Raised when the catalog store cannot be reached or times out

    Callers may retry; the services never do.
    """
