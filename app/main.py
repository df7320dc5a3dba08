"""
Main FastAPI application
Friendship quiz authoring, sharing and scoring API
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from datetime import datetime, timezone
import logging
import time

from app.config import settings
from app.database import init_db
from app.errors import AppError, PayloadTooLargeError, RateLimitExceededError
from app.api import auth, quizzes
from app.utils.rate_limiter import rate_limiter

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Create friendship quizzes, share a code, and score anonymous answers",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Rate limiting middleware
@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    """Apply rate limiting to all requests"""

    if not settings.RATE_LIMIT_ENABLED or request.url.path in ["/health", "/docs", "/redoc", "/openapi.json"]:
        return await call_next(request)

    try:
        await rate_limiter.check_rate_limit(request)
    except RateLimitExceededError as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"message": e.message}
        )

    response = await call_next(request)
    return response


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing"""

    start_time = time.time()

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Duration: {duration:.3f}s"
    )

    return response


# Request body size cap
@app.middleware("http")
async def limit_body_size(request: Request, call_next):
    """Reject bodies whose declared length exceeds MAX_BODY_BYTES"""

    content_length = request.headers.get("content-length", "")
    if content_length.isdigit() and int(content_length) > settings.MAX_BODY_BYTES:
        logger.warning(f"Rejected {content_length}-byte body on {request.url.path}")
        error = PayloadTooLargeError()
        return JSONResponse(
            status_code=error.status_code,
            content={"message": error.message}
        )

    return await call_next(request)


# Security headers middleware
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "no-referrer"
    response.headers["Strict-Transport-Security"] = "max-age=15552000; includeSubDomains"
    return response


# Application errors raised by services and dependencies
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Translate service errors into {message} responses"""

    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}", exc_info=exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": GENERIC_ERROR_MESSAGE}
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message}
    )


# Malformed request bodies
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report the first schema violation as a 400"""

    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "Invalid request"

    return JSONResponse(status_code=400, content={"message": message})


# Framework HTTP errors (unknown routes, wrong methods)
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Format HTTP exceptions consistently"""

    message = "Route not found" if exc.status_code == 404 else exc.detail

    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message}
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors without leaking internals"""

    logger.error(f"Unhandled exception: {str(exc)}", exc_info=exc)

    return JSONResponse(
        status_code=500,
        content={"message": GENERIC_ERROR_MESSAGE}
    )


# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring
    """
    return {
        "status": "OK",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Friendship Quiz API",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health"
    }


# Include routers
app.include_router(auth.router)
app.include_router(quizzes.router)


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize storage on startup"""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.STORE_BACKEND} store)")

    if settings.STORE_BACKEND == "sql":
        try:
            init_db()
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database: {str(e)}")
            raise

    logger.info("Application startup complete")


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down application")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
