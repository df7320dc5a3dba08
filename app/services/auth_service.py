"""
Authentication service: registration, login, token verification
"""
import logging
from typing import Any, Dict, Optional

from email_validator import validate_email, EmailNotValidError

from app.errors import (
    ValidationError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
)
from app.stores.base import QuizStore, UserDocument
from app.utils.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_access_token,
)

logger = logging.getLogger(__name__)


class UserClaims:
    """Identity carried by a verified bearer token"""

    def __init__(self, id: str, email: str, name: str):
        self.id = id
        self.email = email
        self.name = name

    def __repr__(self):
        return f"<UserClaims(id={self.id}, email={self.email})>"


class AuthService:
    """Service for user credentials and bearer tokens"""

    MIN_NAME_LENGTH = 2
    MAX_NAME_LENGTH = 50
    MIN_PASSWORD_LENGTH = 6

    def register(
        self,
        store: QuizStore,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        confirm_password: Optional[str]
    ) -> Dict[str, Any]:
        """
        Create a user account and sign them in

        Args:
            store: Credential store
            name: Display name (2-50 chars)
            email: Email address, compared case-insensitively
            password: Plain-text password (6+ chars)
            confirm_password: Must equal password

        Returns:
            Dictionary with token and public user fields
        """
        if not all(self._present(v) for v in (name, email, password, confirm_password)):
            raise ValidationError("All fields are required")

        if password != confirm_password:
            raise ValidationError("Passwords do not match")

        if len(password) < self.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {self.MIN_PASSWORD_LENGTH} characters long"
            )

        name = name.strip()
        if not self.MIN_NAME_LENGTH <= len(name) <= self.MAX_NAME_LENGTH:
            raise ValidationError(
                f"Name must be between {self.MIN_NAME_LENGTH} and "
                f"{self.MAX_NAME_LENGTH} characters"
            )

        email = self._normalize_email(email)
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            raise ValidationError("Please provide a valid email address")

        if store.get_user_by_email(email):
            raise DuplicateEmailError()

        user = store.create_user(
            name=name,
            email=email,
            password_hash=hash_password(password)
        )

        logger.info(f"User registered: {user.id}")

        return {
            "token": self._issue_token(user),
            "user": self.public_user(user),
        }

    def login(
        self,
        store: QuizStore,
        email: Optional[str],
        password: Optional[str]
    ) -> Dict[str, Any]:
        """
        Check credentials and issue a fresh token

        Unknown email and wrong password fail identically.
        """
        if not self._present(email) or not password:
            raise ValidationError("Email and password are required")

        user = store.get_user_by_email(self._normalize_email(email))
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise InvalidCredentialsError()

        store.touch_last_login(user.id)
        user = store.get_user(user.id) or user

        logger.info(f"User logged in: {user.id}")

        return {
            "token": self._issue_token(user),
            "user": self.public_user(user),
        }

    def verify_token(self, token: Optional[str]) -> UserClaims:
        """
        Decode a bearer token into claims

        Raises:
            MissingTokenError: no token supplied
            InvalidTokenError: signature, expiry or payload invalid
        """
        claims = decode_access_token(token)
        user_id = claims.get("id")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError()

        return UserClaims(
            id=user_id,
            email=claims.get("email", ""),
            name=claims.get("name", "")
        )

    def get_profile(self, store: QuizStore, claims: UserClaims) -> Dict[str, Any]:
        user = store.get_user(claims.id)
        if not user:
            raise NotFoundError("User not found")
        return self.public_user(user)

    @staticmethod
    def public_user(user: UserDocument) -> Dict[str, Any]:
        return {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "created_at": user.created_at,
            "last_login": user.last_login,
        }

    @staticmethod
    def _issue_token(user: UserDocument) -> str:
        return create_access_token(user.id, user.email, user.name)

    @staticmethod
    def _normalize_email(email: str) -> str:
        return email.strip().lower()

    @staticmethod
    def _present(value: Optional[str]) -> bool:
        return isinstance(value, str) and bool(value.strip())


# Global instance
auth_service = AuthService()
