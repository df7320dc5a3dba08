"""
Pydantic schemas for quiz-related requests and responses
"""
from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import Field, StrictInt

from app.schemas.base import CamelModel


class QuizCreateRequest(CamelModel):
    """Request schema for quiz creation; question shape is checked by the service"""
    title: Optional[str] = None
    creator_name: Optional[str] = None
    questions: Optional[List[Any]] = None


# Option index; booleans and numeric strings are not coerced
AnswerIndex = Annotated[StrictInt, Field(ge=0, le=3)]


class ResponseSubmission(CamelModel):
    """Schema for an anonymous quiz submission"""
    respondent_name: Optional[str] = None
    answers: Optional[List[AnswerIndex]] = None


class PublicQuestion(CamelModel):
    """Question as shown to respondents - no answer key"""
    question: str
    options: List[str]


class QuizSummary(CamelModel):
    id: str
    code: str
    title: str
    creator: str
    questions_count: int
    created_at: datetime


class QuizCreatedResponse(CamelModel):
    message: str
    quiz: QuizSummary


class ResponseSummary(CamelModel):
    id: str
    respondent_name: str
    score: int
    percentage: int
    completed_at: datetime


class OwnedQuiz(CamelModel):
    """Owner's view of a quiz in their listing"""
    id: str
    code: str
    title: str
    creator: str
    created_at: datetime
    questions: List[PublicQuestion]
    questions_count: int
    responses: List[ResponseSummary]
    responses_count: int


class PublicQuiz(CamelModel):
    """Quiz as served to respondents by code"""
    id: str
    code: str
    title: str
    creator: str
    questions: List[PublicQuestion]


class ScoreResult(CamelModel):
    response_id: str
    score: int
    percentage: int
    total_questions: int
    respondent_name: str


class QuestionBreakdown(CamelModel):
    question: str
    options: List[str]
    correct_answer: int
    user_answer: Optional[int] = None
    is_correct: bool


class DetailedResult(CamelModel):
    """Owner-only per-question breakdown of one response"""
    respondent: str
    score: int
    percentage: int
    completed_at: datetime
    questions: List[QuestionBreakdown]
