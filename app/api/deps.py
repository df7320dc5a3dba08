"""
Shared FastAPI dependencies: store selection and bearer authentication
"""
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.services.auth_service import auth_service, UserClaims
from app.stores import QuizStore, SQLStore, RedisStore

bearer_scheme = HTTPBearer(auto_error=False)

_redis_store: Optional[RedisStore] = None


def get_redis_store() -> RedisStore:
    """Lazily create the process-wide Redis store"""
    global _redis_store
    if _redis_store is None:
        _redis_store = RedisStore.from_url(settings.REDIS_URL)
    return _redis_store


def get_store(db: Session = Depends(get_db)) -> QuizStore:
    """Store for the configured backend; SQL stores are bound to the request session"""
    if settings.STORE_BACKEND == "redis":
        return get_redis_store()
    return SQLStore(db)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> UserClaims:
    """Require a valid `Authorization: Bearer <token>` header"""
    token = credentials.credentials if credentials else None
    return auth_service.verify_token(token)
