"""
SQLAlchemy-backed store
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import DuplicateEmailError
from app.models import User, Quiz, QuizResponse
from app.stores.base import (
    QuizStore,
    CodeConflictError,
    UserDocument,
    QuestionDocument,
    ResponseDocument,
    QuizDocument,
)

logger = logging.getLogger(__name__)


def _as_uuid(value: str) -> Optional[uuid.UUID]:
    """Parse an id from a URL; malformed ids simply match nothing"""
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError):
        return None


class SQLStore(QuizStore):
    """Store bound to a single request-scoped session"""

    def __init__(self, db: Session):
        self.db = db

    # Users

    def create_user(self, name: str, email: str, password_hash: str) -> UserDocument:
        user = User(name=name, email=email, password_hash=password_hash)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against another registration for the same email
            self.db.rollback()
            logger.warning(f"Duplicate email on insert: {email}")
            raise DuplicateEmailError()
        self.db.refresh(user)
        return self._user_document(user)

    def get_user(self, user_id: str) -> Optional[UserDocument]:
        parsed = _as_uuid(user_id)
        if parsed is None:
            return None
        user = self.db.get(User, parsed)
        return self._user_document(user) if user else None

    def get_user_by_email(self, email: str) -> Optional[UserDocument]:
        user = self.db.query(User).filter(User.email == email).first()
        return self._user_document(user) if user else None

    def touch_last_login(self, user_id: str) -> None:
        parsed = _as_uuid(user_id)
        user = self.db.get(User, parsed) if parsed else None
        if user:
            user.last_login = datetime.now(timezone.utc)
            self.db.commit()

    # Quizzes

    def code_exists(self, code: str) -> bool:
        return self.db.query(Quiz.id).filter(Quiz.code == code).first() is not None

    def create_quiz(
        self,
        code: str,
        title: str,
        creator: str,
        creator_id: str,
        questions: List[QuestionDocument]
    ) -> QuizDocument:
        quiz = Quiz(
            code=code,
            title=title,
            creator=creator,
            creator_id=_as_uuid(creator_id),
            questions=[q.model_dump() for q in questions],
        )
        self.db.add(quiz)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Quiz code collision on insert: {code}")
            raise CodeConflictError(code)
        self.db.refresh(quiz)
        return self._quiz_document(quiz)

    def get_quiz(self, quiz_id: str) -> Optional[QuizDocument]:
        parsed = _as_uuid(quiz_id)
        if parsed is None:
            return None
        quiz = self.db.get(Quiz, parsed)
        return self._quiz_document(quiz) if quiz else None

    def get_quiz_by_code(self, code: str) -> Optional[QuizDocument]:
        quiz = self.db.query(Quiz).filter(
            Quiz.code == code,
            Quiz.is_active.is_(True)
        ).first()
        return self._quiz_document(quiz) if quiz else None

    def list_quizzes_by_owner(self, owner_id: str) -> List[QuizDocument]:
        parsed = _as_uuid(owner_id)
        if parsed is None:
            return []
        quizzes = self.db.query(Quiz).filter(
            Quiz.creator_id == parsed,
            Quiz.is_active.is_(True)
        ).order_by(Quiz.created_at.desc()).all()
        return [self._quiz_document(q) for q in quizzes]

    def add_response(self, quiz_id: str, response: ResponseDocument) -> None:
        row = QuizResponse(
            id=response.id,
            quiz_id=_as_uuid(quiz_id),
            respondent_name=response.respondent_name,
            answers=response.answers,
            score=response.score,
            percentage=response.percentage,
            completed_at=response.completed_at,
            ip_address=response.ip_address,
        )
        self.db.add(row)
        self.db.commit()

    def get_response(self, quiz_id: str, response_id: str) -> Optional[ResponseDocument]:
        parsed = _as_uuid(quiz_id)
        if parsed is None:
            return None
        row = self.db.query(QuizResponse).filter(
            QuizResponse.quiz_id == parsed,
            QuizResponse.id == response_id
        ).first()
        return self._response_document(row) if row else None

    def deactivate_quiz(self, quiz_id: str) -> None:
        parsed = _as_uuid(quiz_id)
        quiz = self.db.get(Quiz, parsed) if parsed else None
        if quiz:
            quiz.is_active = False
            self.db.commit()

    # Row -> document conversion

    @staticmethod
    def _user_document(user: User) -> UserDocument:
        return UserDocument(
            id=str(user.id),
            name=user.name,
            email=user.email,
            password_hash=user.password_hash,
            created_at=user.created_at,
            last_login=user.last_login,
        )

    @staticmethod
    def _response_document(row: QuizResponse) -> ResponseDocument:
        return ResponseDocument(
            id=row.id,
            respondent_name=row.respondent_name,
            answers=row.answers,
            score=row.score,
            percentage=row.percentage,
            completed_at=row.completed_at,
            ip_address=row.ip_address,
        )

    def _quiz_document(self, quiz: Quiz) -> QuizDocument:
        return QuizDocument(
            id=str(quiz.id),
            code=quiz.code,
            title=quiz.title,
            creator=quiz.creator,
            creator_id=str(quiz.creator_id),
            questions=[QuestionDocument.model_validate(q) for q in quiz.questions],
            responses=[self._response_document(r) for r in quiz.responses],
            is_active=quiz.is_active,
            created_at=quiz.created_at,
        )
