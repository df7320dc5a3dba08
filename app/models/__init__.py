"""
Database models package
"""
from app.models.user import User
from app.models.quiz import Quiz
from app.models.quiz_response import QuizResponse

__all__ = ["User", "Quiz", "QuizResponse"]
