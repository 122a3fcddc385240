"""
Error types and handlers for the Book Review API.

Every failure leaves the API as ``{"error": <message>}`` with a status from
{400, 401, 403, 404, 500}. Domain errors subclass ``HTTPException`` so route
handlers can raise them exactly like a plain ``HTTPException``.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class BookReviewError(HTTPException):
    """Base class for errors surfaced to API clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: str = None, headers: dict = None):
        super().__init__(
            status_code=self.status_code,
            detail=message or self.message,
            headers=headers,
        )


class ValidationError(BookReviewError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid input"


class DuplicateError(BookReviewError):
    """Uniqueness violation on email, isbn or review."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Resource already exists"


class DuplicateReviewError(DuplicateError):
    message = "You have already reviewed this book"


class AuthError(BookReviewError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authentication required"


class MissingTokenError(AuthError):
    message = "Access token required"


class InvalidTokenError(AuthError):
    message = "Invalid token"


class InvalidCredentialsError(AuthError):
    message = "Invalid credentials"


class ForbiddenError(BookReviewError):
    """Role or ownership check failed."""

    status_code = status.HTTP_403_FORBIDDEN
    message = "Access denied"


class NotFoundError(BookReviewError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class StoreError(BookReviewError):
    """Underlying storage failure."""

    message = "Database error"


def error_response(status_code: int, message: str, headers: dict = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # Drop the "body"/"query"/"path" prefix from the location
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    msg = first.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))


async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Store error on %s %s", request.method, request.url.path)
    return error_response(StoreError.status_code, StoreError.message)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
