# utils/permissions.py
from sqlalchemy.orm import Session

from models.users import User
from schemas.user import TokenData
from utils.errors import ForbiddenError, InvalidTokenError, NotFoundError
from utils.tokenJWT import is_admin


def get_or_404(db: Session, model, obj_id: int, label: str):
    """Fetch a row by primary key or raise ``NotFoundError("<label> not found")``."""
    obj = db.query(model).filter(model.id == obj_id).first()
    if obj is None:
        raise NotFoundError(f"{label} not found")
    return obj


def can_modify(owner_id: int, user: TokenData) -> bool:
    return owner_id == user.id or is_admin(user)


# Owner-or-admin policy shared by reviews, comments and images
def ensure_owner_or_admin(owner_id: int, user: TokenData, message: str = "Access denied") -> None:
    if not can_modify(owner_id, user):
        raise ForbiddenError(message)


# Tokens outlive their accounts; inserts that reference the caller check first
def ensure_account_exists(db: Session, user_id: int) -> None:
    if db.query(User.id).filter(User.id == user_id).first() is None:
        raise InvalidTokenError("Account no longer exists")
