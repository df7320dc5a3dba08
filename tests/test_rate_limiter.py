import pytest

from app.config import settings
from app.errors import RateLimitExceededError
from app.utils.rate_limiter import RateLimiter


def test_limit_is_per_client():
    limiter = RateLimiter(max_requests=2, window_seconds=60)

    limiter.check("1.1.1.1", now=0)
    limiter.check("1.1.1.1", now=1)
    limiter.check("2.2.2.2", now=1)

    with pytest.raises(RateLimitExceededError):
        limiter.check("1.1.1.1", now=2)


def test_window_slides():
    limiter = RateLimiter(max_requests=1, window_seconds=60)

    limiter.check("1.1.1.1", now=0)
    with pytest.raises(RateLimitExceededError):
        limiter.check("1.1.1.1", now=30)

    limiter.check("1.1.1.1", now=61)


def test_middleware_returns_429(client, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr("app.main.rate_limiter", RateLimiter(max_requests=2, window_seconds=60))

    assert client.get("/").status_code == 200
    assert client.get("/").status_code == 200
    response = client.get("/")

    assert response.status_code == 429
    assert response.json() == {
        "message": "Too many requests from this IP, please try again later."
    }


def test_health_is_exempt(client, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr("app.main.rate_limiter", RateLimiter(max_requests=1, window_seconds=60))

    for _ in range(3):
        assert client.get("/health").status_code == 200


def test_expired_clients_are_forgotten():
    limiter = RateLimiter(max_requests=5, window_seconds=10)

    for i in range(1000):
        limiter.check(f"10.0.{i // 256}.{i % 256}", now=0)
    assert len(limiter.tracker) == 1000

    limiter.check("1.1.1.1", now=100)

    assert list(limiter.tracker) == ["1.1.1.1"]


def test_blocked_client_stays_tracked_until_window_passes():
    limiter = RateLimiter(max_requests=1, window_seconds=10)
    limiter.check("1.1.1.1", now=0)

    with pytest.raises(RateLimitExceededError):
        limiter.check("1.1.1.1", now=5)

    assert len(limiter.tracker["1.1.1.1"]) == 1
