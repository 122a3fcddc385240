# backend/populate_db.py
"""Seed the database with an admin account and a few sample books."""
import logging
import os
import sys

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from sqlalchemy.orm import Session

from config import settings
from database import SessionLocal, init_db
from models.book import Book
from models.users import User
from utils.hashing import get_password_hash

logger = logging.getLogger(__name__)

SAMPLE_BOOKS = [
    {
        "title": "The Great Gatsby",
        "author": "F. Scott Fitzgerald",
        "isbn": "978-0743273565",
        "description": "A story of the fabulously wealthy Jay Gatsby and his love for the beautiful Daisy Buchanan.",
        "published_year": 1925,
        "genre": "Classic Fiction",
        "cover_image": "https://images.unsplash.com/photo-1544947950-fa07a98d237f?w=300&h=400&fit=crop",
    },
    {
        "title": "To Kill a Mockingbird",
        "author": "Harper Lee",
        "isbn": "978-0446310789",
        "description": "The story of young Scout Finch and her father Atticus in a racially divided Alabama town.",
        "published_year": 1960,
        "genre": "Classic Fiction",
        "cover_image": "https://images.unsplash.com/photo-1512820790803-83ca734da794?w=300&h=400&fit=crop",
    },
    {
        "title": "1984",
        "author": "George Orwell",
        "isbn": "978-0451524935",
        "description": "A dystopian novel about totalitarianism and surveillance society.",
        "published_year": 1949,
        "genre": "Science Fiction",
        "cover_image": "https://images.unsplash.com/photo-1541963463532-d68292c34b19?w=300&h=400&fit=crop",
    },
]


def ensure_admin(session: Session) -> User:
    """Create the configured admin account unless it already exists."""
    email = settings.ADMIN_EMAIL.strip().lower()
    admin = session.query(User).filter(User.email == email).first()
    if admin:
        return admin

    admin = User(
        name=settings.ADMIN_NAME,
        email=email,
        password_hash=get_password_hash(settings.ADMIN_PASSWORD),
        role="admin",
    )
    session.add(admin)
    session.commit()
    session.refresh(admin)
    logger.info("Admin user %s created", email)
    return admin


def ensure_sample_books(session: Session) -> int:
    """Insert the sample catalog when no book exists yet; returns the number added."""
    if session.query(Book.id).first():
        return 0
    for data in SAMPLE_BOOKS:
        session.add(Book(**data))
    session.commit()
    logger.info("Added %d sample books", len(SAMPLE_BOOKS))
    return len(SAMPLE_BOOKS)


def populate_database(session: Session = None):
    """Main execution function to populate database."""
    own_session = session is None
    session = session or SessionLocal()
    try:
        ensure_admin(session)
        ensure_sample_books(session)
    finally:
        if own_session:
            session.close()


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    init_db()
    populate_database()
