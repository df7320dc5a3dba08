"""
Quiz authoring, sharing and submission API endpoints
"""
from typing import List
from fastapi import APIRouter, Depends, Request
import logging

from app.api.deps import get_store, get_current_user
from app.schemas.base import MessageResponse
from app.schemas.quiz import (
    QuizCreateRequest,
    QuizCreatedResponse,
    QuizSummary,
    OwnedQuiz,
    PublicQuiz,
    ResponseSubmission,
    ScoreResult,
    DetailedResult,
)
from app.services.auth_service import UserClaims
from app.services.quiz_service import quiz_service
from app.stores import QuizStore

router = APIRouter(prefix="/quizzes", tags=["quizzes"])
logger = logging.getLogger(__name__)


@router.post("", response_model=QuizCreatedResponse, status_code=201)
def create_quiz(
    request: QuizCreateRequest,
    claims: UserClaims = Depends(get_current_user),
    store: QuizStore = Depends(get_store)
):
    """
    Create a quiz owned by the caller

    - 1-10 questions, each with exactly 4 options
    - correctAnswer is the index (0-3) of the right option
    - Returns the shareable code; the answer key is never echoed back
    """
    summary = quiz_service.create_quiz(
        store,
        claims,
        title=request.title,
        creator_name=request.creator_name,
        questions=request.questions,
    )
    return QuizCreatedResponse(
        message="Quiz created successfully",
        quiz=QuizSummary(**summary)
    )


@router.get("", response_model=List[OwnedQuiz])
def list_quizzes(
    claims: UserClaims = Depends(get_current_user),
    store: QuizStore = Depends(get_store)
):
    """Caller's active quizzes with response summaries, newest first"""
    return [OwnedQuiz(**quiz) for quiz in quiz_service.list_own_quizzes(store, claims)]


@router.get("/code/{code}", response_model=PublicQuiz)
def get_quiz_by_code(code: str, store: QuizStore = Depends(get_store)):
    """Quiz for respondents - questions and options only"""
    return PublicQuiz(**quiz_service.get_public_quiz(store, code))


@router.post("/{quiz_id}/responses", response_model=ScoreResult)
def submit_response(
    quiz_id: str,
    submission: ResponseSubmission,
    request: Request,
    store: QuizStore = Depends(get_store)
):
    """
    Submit answers anonymously

    Returns score and percentage; correct answers are not revealed.
    """
    result = quiz_service.submit_response(
        store,
        quiz_id,
        respondent_name=submission.respondent_name,
        answers=submission.answers,
        ip_address=request.client.host if request.client else None,
    )
    return ScoreResult(**result)


@router.get("/{quiz_id}/responses/{response_id}", response_model=DetailedResult)
def get_detailed_result(
    quiz_id: str,
    response_id: str,
    claims: UserClaims = Depends(get_current_user),
    store: QuizStore = Depends(get_store)
):
    """Owner-only per-question breakdown of a single response"""
    return DetailedResult(
        **quiz_service.get_detailed_result(store, claims, quiz_id, response_id)
    )


@router.delete("/{quiz_id}", response_model=MessageResponse)
def delete_quiz(
    quiz_id: str,
    claims: UserClaims = Depends(get_current_user),
    store: QuizStore = Depends(get_store)
):
    """Deactivate a quiz; its code stops resolving and responses are retained"""
    quiz_service.delete_quiz(store, claims, quiz_id)
    return MessageResponse(message="Quiz deleted successfully")
