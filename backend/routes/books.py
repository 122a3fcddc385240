# backend/routes/books.py
import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.book import Book
from models.review import Review
from schemas import book as book_schemas
from schemas.user import TokenData
from services.reviews import get_book_detail
from utils.audit import client_ip, write_log
from utils.errors import DuplicateError, ValidationError
from utils.permissions import get_or_404
from utils.tokenJWT import admin_required
from utils.uploads import remove_uploads, uploaded_image_urls

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Books"])


# ---- HELPERS ----
def _norm_isbn(isbn):
    if isbn is None:
        return None
    value = isbn.strip()
    return value or None


def _clean_payload(payload: book_schemas.BookPayload) -> dict:
    data = payload.model_dump()
    data["title"] = (data["title"] or "").strip()
    data["author"] = (data["author"] or "").strip()
    if not data["title"] or not data["author"]:
        raise ValidationError("Title and author are required")
    data["isbn"] = _norm_isbn(data["isbn"])
    return data


def _ensure_isbn_free(db: Session, isbn, exclude_id: int = None):
    if isbn is None:
        return
    query = db.query(Book.id).filter(Book.isbn == isbn)
    if exclude_id is not None:
        query = query.filter(Book.id != exclude_id)
    if query.first():
        raise DuplicateError("A book with this ISBN already exists")


# =========================
# CATALOG (public)
# =========================
@router.get("/books", response_model=book_schemas.BookList)
def list_books(db: Session = Depends(get_db)):
    books = db.query(Book).order_by(Book.created_at.desc(), Book.id.desc()).all()
    return {"books": books}


@router.get("/books/{book_id}", response_model=book_schemas.BookDetail)
def book_detail(book_id: int, db: Session = Depends(get_db)):
    return get_book_detail(db, book_id)


# =========================
# CATALOG MANAGEMENT (admin)
# =========================
@router.post("/books", status_code=status.HTTP_201_CREATED)
def create_book(
    payload: book_schemas.BookPayload,
    request: Request,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(admin_required),
):
    data = _clean_payload(payload)
    _ensure_isbn_free(db, data["isbn"])

    book = Book(**data)
    db.add(book)
    db.commit()
    db.refresh(book)

    write_log(db, user_id=current_user.id, action="BOOK_CREATE", resource="books",
              ip=client_ip(request), meta={"id": book.id, "title": book.title})
    logger.info("Book %s created by %s", book.id, current_user.id)

    return {"message": "Book created successfully", "bookId": book.id}


@router.put("/books/{book_id}")
def update_book(
    book_id: int,
    payload: book_schemas.BookPayload,
    request: Request,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(admin_required),
):
    data = _clean_payload(payload)
    book = get_or_404(db, Book, book_id, "Book")
    _ensure_isbn_free(db, data["isbn"], exclude_id=book.id)

    # Full replacement, fields left out become empty
    for key, value in data.items():
        setattr(book, key, value)
    db.commit()

    write_log(db, user_id=current_user.id, action="BOOK_UPDATE", resource="books",
              ip=client_ip(request), meta={"id": book_id})

    return {"message": "Book updated successfully"}


@router.delete("/books/{book_id}")
def delete_book(
    book_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(admin_required),
):
    book = get_or_404(db, Book, book_id, "Book")
    title = book.title

    # Reviews, comments and images are removed by the database cascade
    image_urls = uploaded_image_urls(db, Review.book_id == book_id)
    db.delete(book)
    db.commit()
    remove_uploads(image_urls)

    write_log(db, user_id=current_user.id, action="BOOK_DELETE", resource="books",
              ip=client_ip(request), meta={"id": book_id, "title": title})
    logger.info("Book %s deleted by %s", book_id, current_user.id)

    return {"message": "Book deleted successfully"}
