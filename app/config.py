"""
Configuration management using Pydantic Settings
"""
from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Storage
    STORE_BACKEND: str = Field("sql", pattern="^(sql|redis)$")
    DATABASE_URL: str
    REDIS_URL: str = "redis://redis:6379/0"

    # Auth
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = Field(12, ge=12, le=31)

    # Application
    APP_NAME: str = "Friendship Quiz API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:5500"]

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 900  # 15 minutes

    # Request Limits
    MAX_BODY_BYTES: int = 10 * 1024 * 1024  # 10MB

    # Quiz Settings
    MIN_QUIZ_QUESTIONS: int = 1
    MAX_QUIZ_QUESTIONS: int = 10
    QUIZ_CODE_LENGTH: int = 8
    MAX_CODE_ATTEMPTS: int = 10

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
