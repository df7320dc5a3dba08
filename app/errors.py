"""
Application error taxonomy

Every error carries the client-facing message and the HTTP status it maps to.
Handlers in app.main translate them into {"message": ...} responses.
"""


class AppError(Exception):
    """Base class for errors surfaced to API clients"""

    status_code = 500
    default_message = "Something went wrong!"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class DuplicateEmailError(AppError):
    status_code = 400
    default_message = "User already exists with this email"


class InvalidCredentialsError(AppError):
    """Deliberately generic so callers cannot tell which emails exist"""
    status_code = 400
    default_message = "Invalid email or password"


class MissingTokenError(AppError):
    status_code = 401
    default_message = "Access token required"


class InvalidTokenError(AppError):
    status_code = 403
    default_message = "Invalid token"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class RateLimitExceededError(AppError):
    status_code = 429
    default_message = "Too many requests from this IP, please try again later."


class InternalError(AppError):
    status_code = 500


class CodeSpaceExhaustedError(InternalError):
    default_message = "Could not allocate a unique quiz code"


class PayloadTooLargeError(AppError):
    status_code = 413
    default_message = "Request body too large"
