"""
Authentication API endpoints
"""
from fastapi import APIRouter, Depends
import logging

from app.api.deps import get_store, get_current_user
from app.schemas.auth import RegisterRequest, LoginRequest, AuthResponse, UserPublic
from app.services.auth_service import auth_service, UserClaims
from app.stores import QuizStore

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(request: RegisterRequest, store: QuizStore = Depends(get_store)):
    """
    Register a new account

    - Name 2-50 characters, valid email, password 6+ characters
    - Email is unique (case-insensitive)
    - Returns a 7-day bearer token
    """
    result = auth_service.register(
        store,
        name=request.name,
        email=request.email,
        password=request.password,
        confirm_password=request.confirm_password,
    )
    return AuthResponse(message="User registered successfully", **result)


@router.post("/login", response_model=AuthResponse)
def login(request: LoginRequest, store: QuizStore = Depends(get_store)):
    """Exchange email and password for a fresh bearer token"""
    result = auth_service.login(store, email=request.email, password=request.password)
    return AuthResponse(message="Login successful", **result)


@router.get("/profile", response_model=UserPublic)
def profile(
    claims: UserClaims = Depends(get_current_user),
    store: QuizStore = Depends(get_store)
):
    """Current user's profile (never includes the password hash)"""
    return UserPublic(**auth_service.get_profile(store, claims))
