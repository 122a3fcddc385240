"""
Pytest configuration and fixtures for the Book Review API tests.
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend folder to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from main import app
from database import Base, get_db, init_db
from models.book import Book
from models.review import Review
from models.users import User
from utils.hashing import get_password_hash
from utils.tokenJWT import token_for_user

DEFAULT_PASSWORD = "secret123"

# bcrypt is slow on purpose, hash the shared fixture password once
_DEFAULT_HASH = get_password_hash(DEFAULT_PASSWORD)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture()
def engine():
    """In-memory SQLite shared by every session of a single test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    """Session for arranging data and checking results directly in the store."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory):
    """API client wired to the in-memory store."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture()
def make_user(db_session):
    def _make_user(name="Reader", email="reader@example.com", role="user"):
        user = User(name=name, email=email, password_hash=_DEFAULT_HASH, role=role)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user


@pytest.fixture()
def user(make_user):
    return make_user("Alice", "alice@example.com")


@pytest.fixture()
def other_user(make_user):
    return make_user("Bob", "bob@example.com")


@pytest.fixture()
def admin(make_user):
    return make_user("Admin User", "admin@example.com", role="admin")


def auth_headers(user) -> dict:
    """Raw token in the Authorization header, no Bearer prefix."""
    return {"Authorization": token_for_user(user)}


@pytest.fixture()
def user_headers(user):
    return auth_headers(user)


@pytest.fixture()
def other_headers(other_user):
    return auth_headers(other_user)


@pytest.fixture()
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture()
def make_book(db_session):
    def _make_book(title="Dune", author="Frank Herbert", isbn=None, **extra):
        book = Book(title=title, author=author, isbn=isbn, **extra)
        db_session.add(book)
        db_session.commit()
        db_session.refresh(book)
        return book
    return _make_book


@pytest.fixture()
def book(make_book):
    return make_book()


@pytest.fixture()
def make_review(db_session):
    def _make_review(book, user, rating=4, review_text="Worth reading"):
        review = Review(book_id=book.id, user_id=user.id, rating=rating, review_text=review_text)
        db_session.add(review)
        db_session.commit()
        db_session.refresh(review)
        return review
    return _make_review


@pytest.fixture()
def review(make_review, book, user):
    return make_review(book, user)


@pytest.fixture()
def sample_book_data():
    return {
        "title": "The Left Hand of Darkness",
        "author": "Ursula K. Le Guin",
        "isbn": "978-0441478125",
        "description": "An envoy visits the planet Gethen.",
        "published_year": 1969,
        "genre": "Science Fiction",
        "cover_image": "https://example.com/cover.jpg",
    }
