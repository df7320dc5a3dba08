"""
Password hashing and bearer token helpers
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt

from app.config import settings
from app.errors import InvalidTokenError, MissingTokenError

logger = logging.getLogger(__name__)


def _password_bytes(password: str) -> bytes:
    # bcrypt only consumes the first 72 bytes and newer releases reject longer input
    return password.encode("utf-8")[:72]


def hash_password(password: str) -> str:
    """Hash a password with bcrypt at the configured cost factor"""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Corrupt or foreign hash format
        logger.warning("Stored password hash could not be parsed")
        return False


def create_access_token(user_id: str, email: str, name: str) -> str:
    """
    Issue a signed token embedding the user's identity

    Args:
        user_id: User identifier
        email: User email
        name: User display name

    Returns:
        Encoded JWT valid for JWT_EXPIRE_DAYS
    """
    issued_at = datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "email": email,
        "name": name,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.JWT_EXPIRE_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry, returning the raw claims

    Raises:
        MissingTokenError: token absent
        InvalidTokenError: bad signature, expired, or malformed
    """
    if not token:
        raise MissingTokenError()

    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "id"]}
        )
    except jwt.PyJWTError as e:
        logger.info(f"Rejected bearer token: {str(e)}")
        raise InvalidTokenError()

    return claims
