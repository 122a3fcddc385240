# services/reviews.py
"""
Review aggregation and review lifecycle.

Statistics are computed on every read from the stored reviews; nothing is
materialized. Each step of ``get_book_detail`` is its own query, so a comment
or image written in between may or may not show up in a given response.
"""
import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.book import Book
from models.comment import Comment
from models.image import Image
from models.review import Review
from models.users import User
from schemas.user import TokenData
from utils.errors import DuplicateReviewError, NotFoundError, ValidationError
from utils.permissions import ensure_account_exists, ensure_owner_or_admin, get_or_404
from utils.uploads import remove_uploads, uploaded_image_urls

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(rating) -> int:
    # bool is an int subclass, True must not pass as a 1-star rating
    if rating is None or isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("Rating must be between 1 and 5")
    if rating < MIN_RATING or rating > MAX_RATING:
        raise ValidationError("Rating must be between 1 and 5")
    return rating


def average_rating(ratings) -> float:
    ratings = list(ratings)
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


def review_images(db: Session, review_id: int):
    return (
        db.query(Image)
        .filter(Image.review_id == review_id)
        .order_by(Image.created_at.asc(), Image.id.asc())
        .all()
    )


def get_book_detail(db: Session, book_id: int) -> dict:
    """Book, its reviews (author, comment count, images) and rating statistics."""
    book = db.query(Book).filter(Book.id == book_id).first()
    if book is None:
        raise NotFoundError("Book not found")

    comment_count = (
        select(func.count(Comment.id))
        .where(Comment.review_id == Review.id)
        .correlate(Review)
        .scalar_subquery()
        .label("comment_count")
    )
    rows = (
        db.query(Review, User.name, User.email, comment_count)
        .join(User, Review.user_id == User.id)
        .filter(Review.book_id == book_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )

    reviews = []
    for review, user_name, user_email, count in rows:
        reviews.append({
            "id": review.id,
            "book_id": review.book_id,
            "user_id": review.user_id,
            "rating": review.rating,
            "review_text": review.review_text,
            "created_at": review.created_at,
            "updated_at": review.updated_at,
            "user_name": user_name,
            "user_email": user_email,
            "comment_count": count or 0,
            "images": review_images(db, review.id),
        })

    return {
        "book": book,
        "reviews": reviews,
        "average_rating": average_rating(r["rating"] for r in reviews),
        "total_reviews": len(reviews),
    }


def create_review(db: Session, book_id: int, user_id: int, rating, review_text: Optional[str] = None) -> int:
    rating = validate_rating(rating)
    get_or_404(db, Book, book_id, "Book")
    ensure_account_exists(db, user_id)

    # Checked before insert; uq_reviews_user_book is the backstop for races
    existing = (
        db.query(Review.id)
        .filter(Review.book_id == book_id, Review.user_id == user_id)
        .first()
    )
    if existing:
        raise DuplicateReviewError()

    review = Review(book_id=book_id, user_id=user_id, rating=rating, review_text=review_text)
    db.add(review)
    db.commit()
    db.refresh(review)
    logger.info("User %s reviewed book %s (rating %s)", user_id, book_id, rating)
    return review.id


def update_review(db: Session, review_id: int, user: TokenData, rating, review_text: Optional[str] = None) -> Review:
    rating = validate_rating(rating)
    review = get_or_404(db, Review, review_id, "Review")
    ensure_owner_or_admin(review.user_id, user, "You can only edit your own reviews")

    review.rating = rating
    review.review_text = review_text
    db.commit()
    db.refresh(review)
    return review


def delete_review(db: Session, review_id: int, user: TokenData) -> None:
    review = get_or_404(db, Review, review_id, "Review")
    ensure_owner_or_admin(review.user_id, user, "You can only delete your own reviews")

    # Comments and images go with it through ON DELETE CASCADE
    image_urls = uploaded_image_urls(db, Review.id == review.id)
    db.delete(review)
    db.commit()
    remove_uploads(image_urls)


def count_reviews(db: Session) -> int:
    return db.query(func.count(Review.id)).scalar() or 0
