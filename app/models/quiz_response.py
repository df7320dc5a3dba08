"""
QuizResponse model - stores anonymous submissions and their scores
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.quiz import JSONDocument
from app.models.user import utcnow


class QuizResponse(Base):
    """
    Quiz responses table - append-only, ordered by insertion sequence
    """
    __tablename__ = "quiz_responses"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False, index=True)
    quiz_id = Column(Uuid, ForeignKey("quizzes.id"), nullable=False, index=True)
    respondent_name = Column(String(255), nullable=False)
    answers = Column(JSONDocument, nullable=False)
    score = Column(Integer, nullable=False)
    percentage = Column(Integer, nullable=False)
    completed_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    ip_address = Column(String(64))

    quiz = relationship("Quiz", back_populates="responses")

    def __repr__(self):
        return f"<QuizResponse(id={self.id}, quiz_id={self.quiz_id}, score={self.score})>"
