# backend/models/log.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from database import Base

# Audit trail of sign-ins and catalog/review changes, browsed by admins at /logs
class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)
    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Survives the account it points to
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    action = Column(String(50), index=True)      # e.g. LOGIN, REVIEW_CREATE
    resource = Column(String(50), index=True)    # auth, books, reviews, comments, images, users
    status = Column(String(20), index=True)      # SUCCESS / FAIL
    ip = Column(String(64), nullable=True)

    # Ids and other details of the event
    meta = Column(JSON, nullable=True)

    user = relationship("User", lazy="joined", uselist=False)
