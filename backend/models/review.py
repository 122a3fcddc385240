# backend/models/review.py
from sqlalchemy import (
    Column, Integer, Text, DateTime, ForeignKey, CheckConstraint, UniqueConstraint, func
)
from sqlalchemy.orm import relationship
from database import Base

# A star rating (1-5) left by one user on one book
class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        # One review per user per book
        UniqueConstraint("user_id", "book_id", name="uq_reviews_user_book"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating"),
    )

    id = Column(Integer, primary_key=True, index=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    review_text = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    book = relationship("Book", back_populates="reviews")
    user = relationship("User", back_populates="reviews")
    comments = relationship("Comment", back_populates="review", cascade="all, delete-orphan", passive_deletes=True)
    images = relationship("Image", back_populates="review", cascade="all, delete-orphan", passive_deletes=True)
