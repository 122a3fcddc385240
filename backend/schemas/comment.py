from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List


class CommentPayload(BaseModel):
    comment_text: Optional[str] = None


class CommentOut(BaseModel):
    id: int
    review_id: int
    user_id: int
    comment_text: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user_name: str
    user_email: str


class CommentList(BaseModel):
    comments: List[CommentOut]
