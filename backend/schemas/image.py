from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional, List


class ImagePayload(BaseModel):
    image_url: Optional[str] = None
    image_name: Optional[str] = None


class ImageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    review_id: int
    image_url: str
    image_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ImageList(BaseModel):
    images: List[ImageOut]
