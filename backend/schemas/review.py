# backend/schemas/review.py
from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List

from schemas.image import ImageOut


class ReviewPayload(BaseModel):
    rating: Optional[int] = None
    review_text: Optional[str] = None


class ReviewDetail(BaseModel):
    id: int
    book_id: int
    user_id: int
    rating: int
    review_text: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user_name: str
    user_email: str
    comment_count: int = 0
    images: List[ImageOut] = []


class ReviewCount(BaseModel):
    total_reviews: int
