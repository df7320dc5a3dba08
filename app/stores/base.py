"""
Storage interface shared by every persistence backend

Services only ever talk to QuizStore; adapters translate the document models
below to and from their native representation.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class CodeConflictError(Exception):
    """Raised by an adapter when a quiz code is already taken at insert time"""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Quiz code already in use: {code}")


class UserDocument(BaseModel):
    id: str
    name: str
    email: str
    password_hash: str
    created_at: datetime
    last_login: datetime


class QuestionDocument(BaseModel):
    question: str
    options: List[str] = Field(..., min_length=4, max_length=4)
    correct_answer: int = Field(..., ge=0, le=3)


class ResponseDocument(BaseModel):
    id: str
    respondent_name: str
    answers: List[int]
    score: int
    percentage: int
    completed_at: datetime
    ip_address: Optional[str] = None


class QuizDocument(BaseModel):
    id: str
    code: str
    title: str
    creator: str
    creator_id: str
    questions: List[QuestionDocument]
    responses: List[ResponseDocument] = []
    is_active: bool = True
    created_at: datetime


class QuizStore(ABC):
    """Credential and quiz persistence"""

    # Users

    @abstractmethod
    def create_user(self, name: str, email: str, password_hash: str) -> UserDocument:
        """
        Persist a new user

        Raises:
            DuplicateEmailError: if the (lower-cased) email is already stored
        """

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[UserDocument]:
        ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[UserDocument]:
        ...

    @abstractmethod
    def touch_last_login(self, user_id: str) -> None:
        ...

    # Quizzes

    @abstractmethod
    def code_exists(self, code: str) -> bool:
        """True if any quiz, active or not, already uses this code"""

    @abstractmethod
    def create_quiz(
        self,
        code: str,
        title: str,
        creator: str,
        creator_id: str,
        questions: List[QuestionDocument]
    ) -> QuizDocument:
        """
        Persist a new active quiz

        Raises:
            CodeConflictError: if the code was claimed concurrently
        """

    @abstractmethod
    def get_quiz(self, quiz_id: str) -> Optional[QuizDocument]:
        """Fetch a quiz by id regardless of its active flag"""

    @abstractmethod
    def get_quiz_by_code(self, code: str) -> Optional[QuizDocument]:
        """Fetch the active quiz with this exact (upper-case) code"""

    @abstractmethod
    def list_quizzes_by_owner(self, owner_id: str) -> List[QuizDocument]:
        """Active quizzes owned by a user, newest first"""

    @abstractmethod
    def add_response(self, quiz_id: str, response: ResponseDocument) -> None:
        ...

    @abstractmethod
    def get_response(self, quiz_id: str, response_id: str) -> Optional[ResponseDocument]:
        ...

    @abstractmethod
    def deactivate_quiz(self, quiz_id: str) -> None:
        """Soft delete: flag inactive, keep responses"""
