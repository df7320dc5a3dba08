"""
Pydantic schemas for registration, login and profile
"""
from datetime import datetime
from typing import Optional

from app.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    """Fields are optional here so missing ones get the service's message"""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserPublic(CamelModel):
    """User fields safe to return to clients (never the hash)"""
    id: str
    name: str
    email: str
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None


class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserPublic
