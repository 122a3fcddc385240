# backend/routes/admin.py
import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from database import get_db
from models.review import Review
from models.users import User
from schemas.user import RoleUpdate, TokenData, UserList
from utils.audit import client_ip, write_log
from utils.errors import ValidationError
from utils.permissions import get_or_404
from utils.tokenJWT import admin_required
from utils.uploads import remove_uploads, uploaded_image_urls

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Admin"])


# All accounts, newest first (Admin only)
@router.get("/users", response_model=UserList)
def get_all_users(db: Session = Depends(get_db), current_user: TokenData = Depends(admin_required)):
    users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return {"users": users}


# Update user role (Admin only)
@router.put("/users/{user_id}/role")
def update_user_role(
    user_id: int,
    new_role: RoleUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(admin_required),
):
    user = get_or_404(db, User, user_id, "User")
    user.role = new_role.role
    db.commit()
    db.refresh(user)

    write_log(db, user_id=current_user.id, action="USER_ROLE_UPDATE", resource="users",
              ip=client_ip(request), meta={"id": user.id, "role": user.role})
    logger.info("User %s role set to %s by %s", user.id, user.role, current_user.id)

    return {"message": f"User {user.email} role updated to {user.role}", "id": user.id, "role": user.role}


# Delete a user account together with their reviews and comments (Admin only)
@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(admin_required),
):
    user = get_or_404(db, User, user_id, "User")

    # Prevent self-deletion
    if user.id == current_user.id:
        raise ValidationError("You cannot delete your own account")

    email = user.email
    image_urls = uploaded_image_urls(db, Review.user_id == user_id)
    db.delete(user)
    db.commit()
    remove_uploads(image_urls)

    write_log(db, user_id=current_user.id, action="USER_DELETE", resource="users",
              ip=client_ip(request), meta={"id": user_id, "email": email})

    return {"message": f"User {email} has been deleted"}
