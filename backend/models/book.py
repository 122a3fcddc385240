# backend/models/book.py
from sqlalchemy import Column, Integer, String, Text, DateTime, func
from sqlalchemy.orm import relationship
from database import Base

# Model Book
# A catalog entry managed by administrators. Reviews hang off it and are
# removed by the database (ON DELETE CASCADE) together with the book.
class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    author = Column(String(255), nullable=False, index=True)
    isbn = Column(String(20), unique=True, nullable=True)

    description = Column(Text)
    cover_image = Column(String(500))
    published_year = Column(Integer)
    genre = Column(String(100))

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    reviews = relationship("Review", back_populates="book", cascade="all, delete-orphan", passive_deletes=True)
