# utils/tokenJWT.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request, Security
from fastapi.security import APIKeyHeader
from jose import jwt, JWTError
from pydantic import ValidationError as PydanticValidationError

from config import settings
from schemas.user import TokenData
from utils.errors import ForbiddenError, InvalidTokenError, MissingTokenError

logger = logging.getLogger(__name__)

# The raw signed token travels in the Authorization header, without a scheme
token_header = APIKeyHeader(name="Authorization", auto_error=False)

ADMIN_ROLE = "admin"


# Generate a new JWT access token
def create_access_token(data: dict, expires_delta: timedelta = None) -> str:
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def token_for_user(user) -> str:
    """Issue a token carrying the identity claims of a stored user."""
    return create_access_token(
        data={"sub": user.email, "id": user.id, "email": user.email, "name": user.name, "role": user.role}
    )


# Validate signature and expiry, then pull the identity claims out of the token
def decode_access_token(token: str) -> TokenData:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info("Rejected token: %s", e)
        raise InvalidTokenError()

    try:
        return TokenData.model_validate(payload)
    except PydanticValidationError:
        raise InvalidTokenError()


# Authenticate the request from its token alone; no database lookup
def get_current_user(request: Request, token: Optional[str] = Security(token_header)) -> TokenData:
    if not token or not token.strip():
        raise MissingTokenError()

    token = token.strip()
    if token.lower().startswith("bearer "):
        token = token[7:].strip()

    claims = decode_access_token(token)
    request.state.user = claims
    return claims


def is_admin(user: TokenData) -> bool:
    return (user.role or "").lower() == ADMIN_ROLE


# Dependency factory for Role-Based Access Control
def role_required(*allowed_roles):
    def _checker(current_user: TokenData = Depends(get_current_user)) -> TokenData:
        if allowed_roles and (current_user.role or "").lower() not in allowed_roles:
            raise ForbiddenError("Access denied. Admin privileges required.")
        return current_user
    return _checker


admin_required = role_required(ADMIN_ROLE)
