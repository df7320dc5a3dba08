"""
Persistence backends behind the QuizStore interface
"""
from app.stores.base import QuizStore, CodeConflictError
from app.stores.sql_store import SQLStore
from app.stores.redis_store import RedisStore

__all__ = ["QuizStore", "CodeConflictError", "SQLStore", "RedisStore"]
