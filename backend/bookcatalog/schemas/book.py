"""Book schemas"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime


class BookResponse(BaseModel):
    """Schema for book response"""

    id: str
    title: str
    author: Optional[str] = None
    isbn: Optional[str] = None
    description: Optional[str] = None
    cover_image_url: Optional[str] = None
    genres: List[str] = []
    tags: List[str] = []
    average_rating: Optional[float] = None
    ratings_count: int = 0
    created_at: datetime

    class Config:
        from_attributes = True


class ScoredBookResponse(BookResponse):
    """A similar book with the score it was ranked by"""

    score: float


class HomepageFeedResponse(BaseModel):
    """Homepage feed: genre label -> books, in ranking order"""

    is_homepage_feed: bool = True
    feed: Dict[str, List[BookResponse]]


class BookSeed(BaseModel):
    """Schema for a book entry loaded by the seed command"""

    id: Optional[str] = None
    title: str = Field(..., min_length=1, max_length=500)
    author: Optional[str] = None
    isbn: Optional[str] = None
    description: Optional[str] = None
    cover_image_url: Optional[str] = None
    genres: List[str] = []
    tags: List[str] = []
    average_rating: Optional[float] = Field(None, ge=0.0, le=5.0)
    ratings_count: int = Field(0, ge=0)
    created_at: Optional[datetime] = None
