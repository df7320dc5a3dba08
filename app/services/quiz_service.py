"""
Quiz lifecycle service: authoring, sharing, submissions, owner results
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.config import settings
from app.errors import (
    ValidationError,
    NotFoundError,
    ForbiddenError,
    CodeSpaceExhaustedError,
)
from app.services.auth_service import UserClaims
from app.services.code_service import code_generator, CodeGenerator
from app.services.scoring_service import scoring_service
from app.stores.base import (
    QuizStore,
    CodeConflictError,
    QuestionDocument,
    QuizDocument,
    ResponseDocument,
)

logger = logging.getLogger(__name__)


class QuizService:
    """
    Service for quiz operations

    Anything returned to respondents is built from an explicit allow-list of
    fields so the answer key and other people's responses never leave the store.
    """

    OPTIONS_PER_QUESTION = 4

    def __init__(self, generator: CodeGenerator = None):
        self.generator = generator or code_generator

    def create_quiz(
        self,
        store: QuizStore,
        owner: UserClaims,
        title: Optional[str],
        creator_name: Optional[str],
        questions: Optional[List[Any]]
    ) -> Dict[str, Any]:
        """
        Validate and persist a new quiz under a fresh code

        Returns:
            Quiz summary (no answer key)
        """
        if (
            not self._present(title)
            or not self._present(creator_name)
            or not isinstance(questions, list)
        ):
            raise ValidationError("Title, creator name, and questions are required")

        if not settings.MIN_QUIZ_QUESTIONS <= len(questions) <= settings.MAX_QUIZ_QUESTIONS:
            raise ValidationError(
                f"Quiz must have {settings.MIN_QUIZ_QUESTIONS}-"
                f"{settings.MAX_QUIZ_QUESTIONS} questions"
            )

        parsed = [self._parse_question(q) for q in questions]

        quiz = self._insert_with_fresh_code(
            store,
            title=title.strip(),
            creator=creator_name.strip(),
            creator_id=owner.id,
            questions=parsed
        )

        logger.info(f"Quiz created: {quiz.id} (code {quiz.code}) by {owner.id}")

        return self._summary(quiz)

    def list_own_quizzes(self, store: QuizStore, owner: UserClaims) -> List[Dict[str, Any]]:
        """Active quizzes owned by the caller, newest first, without answer keys"""
        quizzes = store.list_quizzes_by_owner(owner.id)

        return [
            {
                "id": quiz.id,
                "code": quiz.code,
                "title": quiz.title,
                "creator": quiz.creator,
                "created_at": quiz.created_at,
                "questions": self._public_questions(quiz),
                "questions_count": len(quiz.questions),
                "responses": [
                    {
                        "id": r.id,
                        "respondent_name": r.respondent_name,
                        "score": r.score,
                        "percentage": r.percentage,
                        "completed_at": r.completed_at,
                    }
                    for r in quiz.responses
                ],
                "responses_count": len(quiz.responses),
            }
            for quiz in quizzes
        ]

    def get_public_quiz(self, store: QuizStore, code: str) -> Dict[str, Any]:
        """Look up an active quiz by its (case-insensitive) code for respondents"""
        quiz = store.get_quiz_by_code((code or "").strip().upper())
        if not quiz or not quiz.is_active:
            raise NotFoundError("Quiz not found")

        return {
            "id": quiz.id,
            "code": quiz.code,
            "title": quiz.title,
            "creator": quiz.creator,
            "questions": self._public_questions(quiz),
        }

    def submit_response(
        self,
        store: QuizStore,
        quiz_id: str,
        respondent_name: Optional[str],
        answers: Optional[List[int]],
        ip_address: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Score and record an anonymous submission

        Returns:
            Score, percentage and totals - never the answer key
        """
        if not self._present(respondent_name) or not isinstance(answers, list):
            raise ValidationError("Respondent name and answers are required")

        quiz = self._get_active_quiz(store, quiz_id)

        if len(answers) != len(quiz.questions):
            raise ValidationError("Invalid number of answers")

        score, percentage = scoring_service.grade(quiz.questions, answers)

        response = ResponseDocument(
            id=str(uuid.uuid4()),
            respondent_name=respondent_name.strip(),
            answers=answers,
            score=score,
            percentage=percentage,
            completed_at=datetime.now(timezone.utc),
            ip_address=ip_address,
        )
        store.add_response(quiz.id, response)

        logger.info(
            f"Response {response.id} recorded for quiz {quiz.id}: "
            f"{score}/{len(quiz.questions)}"
        )

        return {
            "response_id": response.id,
            "score": score,
            "percentage": percentage,
            "total_questions": len(quiz.questions),
            "respondent_name": response.respondent_name,
        }

    def get_detailed_result(
        self,
        store: QuizStore,
        owner: UserClaims,
        quiz_id: str,
        response_id: str
    ) -> Dict[str, Any]:
        """Owner-only per-question breakdown of one response"""
        quiz = self._get_owned_quiz(store, owner, quiz_id)

        response = store.get_response(quiz.id, response_id)
        if not response:
            raise NotFoundError("Response not found")

        return {
            "respondent": response.respondent_name,
            "score": response.score,
            "percentage": response.percentage,
            "completed_at": response.completed_at,
            "questions": scoring_service.breakdown(quiz.questions, response.answers),
        }

    def delete_quiz(self, store: QuizStore, owner: UserClaims, quiz_id: str) -> None:
        """Soft delete: the quiz becomes inactive, its responses are kept"""
        quiz = self._get_owned_quiz(store, owner, quiz_id)
        store.deactivate_quiz(quiz.id)
        logger.info(f"Quiz deactivated: {quiz.id} by {owner.id}")

    def _insert_with_fresh_code(self, store: QuizStore, **fields) -> QuizDocument:
        """Generate a code and insert, resampling if the insert itself collides"""
        for _ in range(self.generator.max_attempts):
            code = self.generator.generate_code(store)
            try:
                return store.create_quiz(code=code, **fields)
            except CodeConflictError:
                logger.warning(f"Quiz code {code} claimed concurrently, retrying")

        raise CodeSpaceExhaustedError()

    def _get_active_quiz(self, store: QuizStore, quiz_id: str) -> QuizDocument:
        quiz = store.get_quiz(quiz_id)
        if not quiz or not quiz.is_active:
            raise NotFoundError("Quiz not found")
        return quiz

    def _get_owned_quiz(self, store: QuizStore, owner: UserClaims, quiz_id: str) -> QuizDocument:
        quiz = self._get_active_quiz(store, quiz_id)
        if quiz.creator_id != owner.id:
            logger.warning(f"User {owner.id} denied access to quiz {quiz.id}")
            raise ForbiddenError("Access denied")
        return quiz

    def _parse_question(self, raw: Any) -> QuestionDocument:
        if not isinstance(raw, dict):
            raise ValidationError("Invalid question format")

        text = raw.get("question")
        options = raw.get("options")
        correct = raw.get("correctAnswer", raw.get("correct_answer"))

        if (
            not self._present(text)
            or not isinstance(options, list)
            or len(options) != self.OPTIONS_PER_QUESTION
            or not all(self._present(o) for o in options)
            or isinstance(correct, bool)
            or not isinstance(correct, int)
            or not 0 <= correct < self.OPTIONS_PER_QUESTION
        ):
            raise ValidationError("Invalid question format")

        return QuestionDocument(question=text.strip(), options=options, correct_answer=correct)

    @staticmethod
    def _public_questions(quiz: QuizDocument) -> List[Dict[str, Any]]:
        return [
            {"question": q.question, "options": list(q.options)}
            for q in quiz.questions
        ]

    @staticmethod
    def _summary(quiz: QuizDocument) -> Dict[str, Any]:
        return {
            "id": quiz.id,
            "code": quiz.code,
            "title": quiz.title,
            "creator": quiz.creator,
            "questions_count": len(quiz.questions),
            "created_at": quiz.created_at,
        }

    @staticmethod
    def _present(value: Any) -> bool:
        return isinstance(value, str) and bool(value.strip())


# Global instance
quiz_service = QuizService()
