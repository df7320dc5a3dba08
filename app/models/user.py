"""
User model - quiz owners and their credentials
"""
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Uuid
from app.database import Base
import uuid


def utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    """
    Users table - email is stored lower-cased so the unique index is case-insensitive
    """
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(128), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    last_login = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
