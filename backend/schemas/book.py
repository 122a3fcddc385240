# backend/schemas/book.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List

from schemas.review import ReviewDetail


class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Payload for POST and PUT /books; title and author are checked by the route
class BookPayload(BaseModel):
    title: Optional[str] = None
    author: Optional[str] = None
    isbn: Optional[str] = Field(default=None, max_length=20)
    description: Optional[str] = None
    published_year: Optional[int] = None
    genre: Optional[str] = None
    cover_image: Optional[str] = None


class BookOut(ORMBase):
    id: int
    title: str
    author: str
    isbn: Optional[str] = None
    description: Optional[str] = None
    published_year: Optional[int] = None
    genre: Optional[str] = None
    cover_image: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BookList(BaseModel):
    books: List[BookOut]


# Book with its reviews and the statistics derived from them
class BookDetail(BaseModel):
    book: BookOut
    reviews: List[ReviewDetail]
    average_rating: float
    total_reviews: int
