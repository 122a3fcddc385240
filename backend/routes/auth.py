# backend/routes/auth.py
import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas import user as schemas
from utils.audit import client_ip, write_log
from utils.errors import DuplicateError, InvalidCredentialsError, NotFoundError, ValidationError
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import get_current_user, token_for_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


def _normalize_email(email) -> str:
    return str(email).strip().lower()


def _find_by_email(db: Session, email: str):
    return db.query(User).filter(func.lower(User.email) == email).first()


# Register a new user
@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: schemas.UserCreate, request: Request, db: Session = Depends(get_db)):
    name = (payload.name or "").strip()
    if not name or not payload.email or not payload.password:
        raise ValidationError("All fields are required")

    email = _normalize_email(payload.email)

    # Check for existing user
    if _find_by_email(db, email):
        write_log(db, user_id=None, action="REGISTER", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": email, "reason": "Email exists"})
        raise DuplicateError("User already exists")

    # New accounts always start with the plain user role
    new_user = User(name=name, email=email, password_hash=get_password_hash(payload.password), role="user")
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    write_log(db, user_id=new_user.id, action="REGISTER", resource="auth",
              ip=client_ip(request), meta={"email": new_user.email})
    logger.info("Registered user %s", new_user.id)

    return {
        "message": "User registered successfully",
        "token": token_for_user(new_user),
        "user": new_user,
    }


# Authenticate user and issue a signed token
@router.post("/login", response_model=schemas.AuthResponse)
def login(payload: schemas.UserLogin, request: Request, db: Session = Depends(get_db)):
    if not payload.email or not payload.password:
        raise ValidationError("Email and password are required")

    db_user = _find_by_email(db, _normalize_email(payload.email))

    # Validate credentials and log failure on error
    if not db_user or not verify_password(payload.password, db_user.password_hash):
        write_log(db, user_id=(db_user.id if db_user else None), action="LOGIN", resource="auth",
                  status="FAIL", ip=client_ip(request), meta={"email": payload.email})
        logger.warning("Failed login for %s", payload.email)
        raise InvalidCredentialsError()

    write_log(db, user_id=db_user.id, action="LOGIN", resource="auth",
              ip=client_ip(request), meta={"email": db_user.email})

    return {"message": "Login successful", "token": token_for_user(db_user), "user": db_user}


def _load_profile(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


# Retrieve current authenticated user details
@router.get("/profile", response_model=schemas.UserEnvelope)
def get_profile(db: Session = Depends(get_db), current_user: schemas.TokenData = Depends(get_current_user)):
    return {"user": _load_profile(db, current_user.id)}


@router.put("/profile")
def update_profile(
    payload: schemas.ProfileUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: schemas.TokenData = Depends(get_current_user),
):
    name = (payload.name or "").strip()
    if not name or not payload.email:
        raise ValidationError("Name and email are required")

    email = _normalize_email(payload.email)
    taken = (
        db.query(User.id)
        .filter(func.lower(User.email) == email, User.id != current_user.id)
        .first()
    )
    if taken:
        raise DuplicateError("Email already taken")

    user = _load_profile(db, current_user.id)
    user.name = name
    user.email = email
    db.commit()

    write_log(db, user_id=user.id, action="PROFILE_UPDATE", resource="auth",
              ip=client_ip(request), meta={"email": email})

    return {"message": "Profile updated successfully"}


# Landing data for the signed-in dashboard
@router.get("/dashboard", response_model=schemas.UserEnvelope)
def dashboard(db: Session = Depends(get_db), current_user: schemas.TokenData = Depends(get_current_user)):
    return {"user": _load_profile(db, current_user.id)}
