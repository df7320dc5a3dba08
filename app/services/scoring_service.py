"""
Quiz scoring service
Exact-match grading of multiple-choice answers
"""
import logging
from typing import Any, Dict, List, Sequence, Tuple
from app.stores.base import QuestionDocument

logger = logging.getLogger(__name__)


class ScoringService:
    """
    Service for scoring quiz responses

    Score is the count of positions where the chosen option index equals the
    question's correct answer. Percentage is round-half-up of 100 * score / total.
    """

    def grade(
        self,
        questions: Sequence[QuestionDocument],
        answers: Sequence[int]
    ) -> Tuple[int, int]:
        """
        Grade a complete submission

        Args:
            questions: Quiz questions with answer key
            answers: Chosen option index per question, same order

        Returns:
            Tuple of (score, percentage)
        """
        score = sum(
            1 for question, answer in zip(questions, answers)
            if self._is_correct(question, answer)
        )
        percentage = self.percentage(score, len(questions))

        logger.debug(f"Graded response: {score}/{len(questions)} ({percentage}%)")

        return score, percentage

    @staticmethod
    def percentage(score: int, total: int) -> int:
        """Round-half-up percentage in exact integer arithmetic"""
        if total <= 0:
            return 0
        return (200 * score + total) // (2 * total)

    def breakdown(
        self,
        questions: Sequence[QuestionDocument],
        answers: Sequence[int]
    ) -> List[Dict[str, Any]]:
        """Per-question view of a response, answer key included"""
        items = []
        for index, question in enumerate(questions):
            user_answer = answers[index] if index < len(answers) else None
            items.append({
                "question": question.question,
                "options": list(question.options),
                "correct_answer": question.correct_answer,
                "user_answer": user_answer,
                "is_correct": self._is_correct(question, user_answer),
            })
        return items

    @staticmethod
    def _is_correct(question: QuestionDocument, answer: Any) -> bool:
        # bool is an int subclass; True must not match option 1
        if isinstance(answer, bool) or not isinstance(answer, int):
            return False
        return answer == question.correct_answer


# Global instance
scoring_service = ScoringService()
