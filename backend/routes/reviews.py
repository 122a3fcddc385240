# backend/routes/reviews.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from database import get_db
from schemas import review as review_schemas
from schemas.user import TokenData
from services import reviews as review_service
from utils.audit import client_ip, write_log
from utils.tokenJWT import admin_required, get_current_user

router = APIRouter(tags=["Reviews"])


# Declared before /reviews/{review_id} routes so "count" never reaches them
@router.get("/reviews/count", response_model=review_schemas.ReviewCount)
def reviews_count(db: Session = Depends(get_db), current_user: TokenData = Depends(admin_required)):
    return {"total_reviews": review_service.count_reviews(db)}


@router.post("/books/{book_id}/reviews", status_code=status.HTTP_201_CREATED)
def create_review(
    book_id: int,
    payload: review_schemas.ReviewPayload,
    request: Request,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    review_id = review_service.create_review(
        db, book_id, current_user.id, payload.rating, payload.review_text
    )
    write_log(db, user_id=current_user.id, action="REVIEW_CREATE", resource="reviews",
              ip=client_ip(request), meta={"id": review_id, "book_id": book_id})
    return {"message": "Review created successfully", "reviewId": review_id}


@router.put("/reviews/{review_id}")
def update_review(
    review_id: int,
    payload: review_schemas.ReviewPayload,
    request: Request,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    review_service.update_review(db, review_id, current_user, payload.rating, payload.review_text)
    write_log(db, user_id=current_user.id, action="REVIEW_UPDATE", resource="reviews",
              ip=client_ip(request), meta={"id": review_id})
    return {"message": "Review updated successfully"}


@router.delete("/reviews/{review_id}")
def delete_review(
    review_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    review_service.delete_review(db, review_id, current_user)
    write_log(db, user_id=current_user.id, action="REVIEW_DELETE", resource="reviews",
              ip=client_ip(request), meta={"id": review_id})
    return {"message": "Review deleted successfully"}
