"""
Quiz model - stores authored quizzes
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.user import utcnow
import uuid

# JSONB on PostgreSQL, plain JSON everywhere else
JSONDocument = JSON().with_variant(JSONB, "postgresql")


class Quiz(Base):
    """
    Quizzes table - questions (with answer key) live in a JSON document column
    """
    __tablename__ = "quizzes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    code = Column(String(16), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    creator = Column(String(255), nullable=False)  # Display name, not the owner
    creator_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    questions = Column(JSONDocument, nullable=False)  # [{question, options, correctAnswer}]
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    responses = relationship(
        "QuizResponse",
        back_populates="quiz",
        order_by="QuizResponse.seq",
        lazy="selectin"
    )

    def __repr__(self):
        return f"<Quiz(id={self.id}, code={self.code}, active={self.is_active})>"
