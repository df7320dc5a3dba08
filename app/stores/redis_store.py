"""
Redis-backed document store

Layout:
    user:{id}                  UserDocument JSON
    user_email:{email}         user id (uniqueness reservation)
    quiz:{id}                  QuizDocument JSON without responses
    quiz_code:{code}           quiz id (uniqueness reservation)
    owner_quizzes:{user_id}    list of quiz ids, newest first
    quiz_responses:{quiz_id}   list of ResponseDocument JSON, oldest first
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional
import redis

from app.config import settings
from app.errors import DuplicateEmailError
from app.stores.base import (
    QuizStore,
    CodeConflictError,
    UserDocument,
    QuestionDocument,
    ResponseDocument,
    QuizDocument,
)

logger = logging.getLogger(__name__)


class RedisStore(QuizStore):
    """Store keeping each user and quiz as a JSON document"""

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str = None) -> "RedisStore":
        client = redis.from_url(
            url or settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5
        )
        logger.info("Redis store client created")
        return cls(client)

    # Users

    def create_user(self, name: str, email: str, password_hash: str) -> UserDocument:
        now = datetime.now(timezone.utc)
        user = UserDocument(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            password_hash=password_hash,
            created_at=now,
            last_login=now,
        )

        # Reserve the email first; a second registration loses here
        if not self.client.set(f"user_email:{email}", user.id, nx=True):
            raise DuplicateEmailError()

        self.client.set(f"user:{user.id}", user.model_dump_json())
        return user

    def get_user(self, user_id: str) -> Optional[UserDocument]:
        raw = self.client.get(f"user:{user_id}")
        return UserDocument.model_validate_json(raw) if raw else None

    def get_user_by_email(self, email: str) -> Optional[UserDocument]:
        user_id = self.client.get(f"user_email:{email}")
        return self.get_user(user_id) if user_id else None

    def touch_last_login(self, user_id: str) -> None:
        user = self.get_user(user_id)
        if user:
            user.last_login = datetime.now(timezone.utc)
            self.client.set(f"user:{user.id}", user.model_dump_json())

    # Quizzes

    def code_exists(self, code: str) -> bool:
        return bool(self.client.exists(f"quiz_code:{code}"))

    def create_quiz(
        self,
        code: str,
        title: str,
        creator: str,
        creator_id: str,
        questions: List[QuestionDocument]
    ) -> QuizDocument:
        quiz = QuizDocument(
            id=str(uuid.uuid4()),
            code=code,
            title=title,
            creator=creator,
            creator_id=creator_id,
            questions=questions,
            created_at=datetime.now(timezone.utc),
        )

        if not self.client.set(f"quiz_code:{code}", quiz.id, nx=True):
            logger.warning(f"Quiz code collision on insert: {code}")
            raise CodeConflictError(code)

        pipe = self.client.pipeline(transaction=True)
        pipe.set(f"quiz:{quiz.id}", self._dump_quiz(quiz))
        pipe.lpush(f"owner_quizzes:{creator_id}", quiz.id)
        pipe.execute()

        return quiz

    def get_quiz(self, quiz_id: str) -> Optional[QuizDocument]:
        raw = self.client.get(f"quiz:{quiz_id}")
        if not raw:
            return None
        quiz = QuizDocument.model_validate_json(raw)
        quiz.responses = self._load_responses(quiz.id)
        return quiz

    def get_quiz_by_code(self, code: str) -> Optional[QuizDocument]:
        quiz_id = self.client.get(f"quiz_code:{code}")
        if not quiz_id:
            return None
        quiz = self.get_quiz(quiz_id)
        return quiz if quiz and quiz.is_active else None

    def list_quizzes_by_owner(self, owner_id: str) -> List[QuizDocument]:
        quizzes = []
        for quiz_id in self.client.lrange(f"owner_quizzes:{owner_id}", 0, -1):
            quiz = self.get_quiz(quiz_id)
            if quiz and quiz.is_active:
                quizzes.append(quiz)
        return quizzes

    def add_response(self, quiz_id: str, response: ResponseDocument) -> None:
        self.client.rpush(f"quiz_responses:{quiz_id}", response.model_dump_json())

    def get_response(self, quiz_id: str, response_id: str) -> Optional[ResponseDocument]:
        for response in self._load_responses(quiz_id):
            if response.id == response_id:
                return response
        return None

    def deactivate_quiz(self, quiz_id: str) -> None:
        raw = self.client.get(f"quiz:{quiz_id}")
        if not raw:
            return
        quiz = QuizDocument.model_validate_json(raw)
        quiz.is_active = False
        self.client.set(f"quiz:{quiz.id}", self._dump_quiz(quiz))

    def _load_responses(self, quiz_id: str) -> List[ResponseDocument]:
        return [
            ResponseDocument.model_validate_json(raw)
            for raw in self.client.lrange(f"quiz_responses:{quiz_id}", 0, -1)
        ]

    @staticmethod
    def _dump_quiz(quiz: QuizDocument) -> str:
        # Responses live in their own list so appends never rewrite the quiz
        return quiz.model_dump_json(exclude={"responses"})
