# backend/utils/uploads.py
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from config import settings
from models.image import Image
from models.review import Review

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads/"

# Saved extension is derived from the accepted content type, never from the client filename
CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def upload_path(image_url: str) -> Optional[Path]:
    """Local file behind an ``/uploads/<name>`` URL, or None when it points anywhere else."""
    if not image_url or not image_url.startswith(UPLOAD_URL_PREFIX):
        return None
    name = image_url[len(UPLOAD_URL_PREFIX):]
    # Only a bare file name written by the upload endpoint
    if not name or "/" in name or "\\" in name or ".." in name:
        return None
    root = Path(settings.UPLOAD_DIR).resolve()
    path = (root / name).resolve()
    if not path.is_relative_to(root) or path == root:
        return None
    return path


def remove_upload(image_url: str) -> None:
    path = upload_path(image_url)
    if path is None:
        if image_url and image_url.startswith(UPLOAD_URL_PREFIX):
            logger.warning("Refusing to remove %r: not a file under the upload directory", image_url)
        return
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove uploaded file %s: %s", path, e)


def remove_uploads(image_urls: Iterable[str]) -> None:
    for image_url in image_urls:
        remove_upload(image_url)


def uploaded_image_urls(db: Session, *criteria) -> List[str]:
    """URLs of uploaded files on images whose parent review matches ``criteria``.

    Read before a review, book or user is deleted; the rows themselves go
    through ON DELETE CASCADE, the files are removed after the commit.
    """
    rows = (
        db.query(Image.image_url)
        .join(Review, Image.review_id == Review.id)
        .filter(*criteria)
        .filter(Image.image_url.like(f"{UPLOAD_URL_PREFIX}%"))
        .all()
    )
    return [image_url for (image_url,) in rows]
