"""
Rate limiting for API endpoints
"""
import time
from collections import defaultdict, deque
from fastapi import Request
from typing import Deque, Dict
import logging

from app.config import settings
from app.errors import RateLimitExceededError

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    In-memory sliding-window rate limiter keyed by client IP
    Production: Use Redis for limits shared across workers
    """

    def __init__(self, max_requests: int = 100, window_seconds: int = 900):
        self.max_requests = max_requests
        self.window_seconds = window_seconds

        # Storage: {client_id: deque of request timestamps}
        self.tracker: Dict[str, Deque[float]] = defaultdict(deque)

    def _get_client_id(self, request: Request) -> str:
        """Extract client identifier from request"""
        return request.client.host if request.client else "unknown"

    def _cleanup_old_entries(self, now: float):
        """Drop timestamps that fell out of the window"""
        cutoff = now - self.window_seconds

        for client_id in list(self.tracker.keys()):
            timestamps = self.tracker[client_id]
            while timestamps and timestamps[0] <= cutoff:
                timestamps.popleft()

            # Remove empty entries
            if not timestamps:
                del self.tracker[client_id]

    def check(self, client_id: str, now: float = None) -> None:
        """
        Record a request for client_id

        Raises:
            RateLimitExceededError: if the window is already full
        """
        now = time.time() if now is None else now

        self._cleanup_old_entries(now)

        timestamps = self.tracker[client_id]
        if len(timestamps) >= self.max_requests:
            logger.warning(f"Rate limit exceeded: {client_id}")
            raise RateLimitExceededError()

        timestamps.append(now)

        logger.debug(f"Rate limit check passed: {client_id} ({len(timestamps)}/{self.max_requests})")

    async def check_rate_limit(self, request: Request) -> None:
        self.check(self._get_client_id(request))

    def reset(self) -> None:
        self.tracker.clear()


# Global instance
rate_limiter = RateLimiter(
    max_requests=settings.RATE_LIMIT_REQUESTS,
    window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS
)
