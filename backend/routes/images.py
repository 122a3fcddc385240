# backend/routes/images.py
import logging
import shutil
import uuid
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.image import Image
from models.review import Review
from schemas import image as image_schemas
from schemas.user import TokenData
from services.reviews import review_images
from utils.audit import client_ip, write_log
from utils.errors import StoreError, ValidationError
from utils.permissions import ensure_owner_or_admin, get_or_404
from utils.tokenJWT import get_current_user
from utils.uploads import CONTENT_TYPE_EXTENSIONS, UPLOAD_URL_PREFIX, remove_upload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Images"])


def _owned_review(db: Session, review_id: int, user: TokenData) -> Review:
    review = get_or_404(db, Review, review_id, "Review")
    ensure_owner_or_admin(review.user_id, user, "You can only add images to your own reviews")
    return review


def _store_image(db: Session, review_id: int, image_url: str, image_name: Optional[str]) -> Image:
    image = Image(review_id=review_id, image_url=image_url, image_name=image_name)
    db.add(image)
    db.commit()
    db.refresh(image)
    return image


@router.post("/reviews/{review_id}/images", status_code=status.HTTP_201_CREATED)
def add_image(
    review_id: int,
    payload: image_schemas.ImagePayload,
    request: Request,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    image_url = (payload.image_url or "").strip()
    if not image_url:
        raise ValidationError("Image URL is required")
    _owned_review(db, review_id, current_user)

    image = _store_image(db, review_id, image_url, payload.image_name)
    write_log(db, user_id=current_user.id, action="IMAGE_CREATE", resource="images",
              ip=client_ip(request), meta={"id": image.id, "review_id": review_id})

    return {"message": "Image added successfully", "imageId": image.id}


# Multipart variant: the file is kept under UPLOAD_DIR and served from /uploads
@router.post("/reviews/{review_id}/images/upload", status_code=status.HTTP_201_CREATED)
def upload_image(
    review_id: int,
    request: Request,
    file: UploadFile = File(...),
    image_name: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    ext = CONTENT_TYPE_EXTENSIONS.get(file.content_type)
    if ext is None:
        raise ValidationError("Invalid file type")
    _owned_review(db, review_id, current_user)

    unique_filename = f"{uuid.uuid4()}.{ext}"
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    save_path = upload_dir / unique_filename
    try:
        with open(save_path, "wb") as buffer:
            shutil.copyfileobj(file.file, buffer)
    except OSError as e:
        logger.exception("Saving upload for review %s failed", review_id)
        raise StoreError("File save error") from e
    finally:
        file.file.close()

    image_url = f"{UPLOAD_URL_PREFIX}{unique_filename}"
    try:
        image = _store_image(db, review_id, image_url, image_name or file.filename)
    except Exception:
        # No row points at the file, so it must not outlive the failed insert
        db.rollback()
        save_path.unlink(missing_ok=True)
        raise
    write_log(db, user_id=current_user.id, action="IMAGE_CREATE", resource="images",
              ip=client_ip(request), meta={"id": image.id, "review_id": review_id, "upload": True})

    return {"message": "Image added successfully", "imageId": image.id, "image_url": image_url}


# Public, in creation order
@router.get("/reviews/{review_id}/images", response_model=image_schemas.ImageList)
def list_images(review_id: int, db: Session = Depends(get_db)):
    return {"images": review_images(db, review_id)}


@router.delete("/images/{image_id}")
def delete_image(
    image_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    image = get_or_404(db, Image, image_id, "Image")
    # Ownership comes from the parent review
    review = get_or_404(db, Review, image.review_id, "Review")
    ensure_owner_or_admin(review.user_id, current_user, "You can only delete images from your own reviews")

    image_url = image.image_url
    db.delete(image)
    db.commit()
    remove_upload(image_url)

    write_log(db, user_id=current_user.id, action="IMAGE_DELETE", resource="images",
              ip=client_ip(request), meta={"id": image_id})

    return {"message": "Image deleted successfully"}
