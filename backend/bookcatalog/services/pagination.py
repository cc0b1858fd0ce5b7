"""Pagination envelope for search results"""

from typing import Generic, List, TypeVar
from fastapi import Response
from sqlalchemy.orm import Query

T = TypeVar("T")

TOTAL_COUNT_HEADER = "X-Total-Count"
PER_PAGE_HEADER = "X-Per-Page"
PAGE_HEADER = "X-Page"
TOTAL_PAGES_HEADER = "X-Total-Pages"


class Page(Generic[T]):
    """
    One page of results plus the metadata describing it

    The metadata is kept apart from ``items`` so it can travel as
    response headers while the body stays a plain array.
    """

    def __init__(self, items: List[T], total: int, page: int, per_page: int):
        self.items = items
        self.total = total
        self.page = page
        self.per_page = per_page

    @classmethod
    def empty(cls, page: int, per_page: int) -> "Page[T]":
        return cls(items=[], total=0, page=page, per_page=per_page)

    @property
    def total_pages(self) -> int:
        if self.total == 0:
            return 0
        return (self.total + self.per_page - 1) // self.per_page

    @property
    def headers(self) -> dict:
        return {
            TOTAL_COUNT_HEADER: str(self.total),
            PER_PAGE_HEADER: str(self.per_page),
            PAGE_HEADER: str(self.page),
            TOTAL_PAGES_HEADER: str(self.total_pages),
        }

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self):
        return f"<Page(page={self.page}, per_page={self.per_page}, total={self.total}, items={len(self.items)})>"


def paginate(query: Query, page: int, per_page: int) -> Page:
    """
    Count the full match set, then fetch the requested slice

    ``query`` must already carry its ORDER BY so slices are stable.
    """
    total = query.order_by(None).count()
    if total == 0:
        return Page.empty(page, per_page)

    # Past the last page: nothing to fetch, keep the true total
    if (page - 1) * per_page >= total:
        return Page(items=[], total=total, page=page, per_page=per_page)

    items = query.offset((page - 1) * per_page).limit(per_page).all()
    return Page(items=items, total=total, page=page, per_page=per_page)


def apply_pagination_headers(response: Response, page: Page) -> None:
    """Expose page metadata as response headers"""
    response.headers.update(page.headers)
