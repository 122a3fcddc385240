# backend/routes/comments.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.comment import Comment
from models.review import Review
from models.users import User
from schemas import comment as comment_schemas
from schemas.user import TokenData
from utils.audit import client_ip, write_log
from utils.errors import ValidationError
from utils.permissions import ensure_account_exists, ensure_owner_or_admin, get_or_404
from utils.tokenJWT import get_current_user

router = APIRouter(tags=["Comments"])


def _comment_text(payload: comment_schemas.CommentPayload) -> str:
    text = (payload.comment_text or "").strip()
    if not text:
        raise ValidationError("Comment text is required")
    return text


@router.post("/reviews/{review_id}/comments", status_code=status.HTTP_201_CREATED)
def add_comment(
    review_id: int,
    payload: comment_schemas.CommentPayload,
    request: Request,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    text = _comment_text(payload)
    get_or_404(db, Review, review_id, "Review")
    ensure_account_exists(db, current_user.id)

    comment = Comment(review_id=review_id, user_id=current_user.id, comment_text=text)
    db.add(comment)
    db.commit()
    db.refresh(comment)

    write_log(db, user_id=current_user.id, action="COMMENT_CREATE", resource="comments",
              ip=client_ip(request), meta={"id": comment.id, "review_id": review_id})

    return {"message": "Comment added successfully", "commentId": comment.id}


# Public, oldest first
@router.get("/reviews/{review_id}/comments", response_model=comment_schemas.CommentList)
def list_comments(review_id: int, db: Session = Depends(get_db)):
    rows = (
        db.query(Comment, User.name, User.email)
        .join(User, Comment.user_id == User.id)
        .filter(Comment.review_id == review_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )
    comments = [
        {
            "id": c.id,
            "review_id": c.review_id,
            "user_id": c.user_id,
            "comment_text": c.comment_text,
            "created_at": c.created_at,
            "updated_at": c.updated_at,
            "user_name": name,
            "user_email": email,
        }
        for c, name, email in rows
    ]
    return {"comments": comments}


@router.put("/comments/{comment_id}")
def update_comment(
    comment_id: int,
    payload: comment_schemas.CommentPayload,
    request: Request,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    text = _comment_text(payload)
    comment = get_or_404(db, Comment, comment_id, "Comment")
    ensure_owner_or_admin(comment.user_id, current_user, "You can only edit your own comments")

    comment.comment_text = text
    db.commit()

    write_log(db, user_id=current_user.id, action="COMMENT_UPDATE", resource="comments",
              ip=client_ip(request), meta={"id": comment_id})

    return {"message": "Comment updated successfully"}


@router.delete("/comments/{comment_id}")
def delete_comment(
    comment_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    comment = get_or_404(db, Comment, comment_id, "Comment")
    ensure_owner_or_admin(comment.user_id, current_user, "You can only delete your own comments")

    db.delete(comment)
    db.commit()

    write_log(db, user_id=current_user.id, action="COMMENT_DELETE", resource="comments",
              ip=client_ip(request), meta={"id": comment_id})

    return {"message": "Comment deleted successfully"}
