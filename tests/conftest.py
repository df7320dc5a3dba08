import os
import tempfile

# Settings are read at import time, so the environment must be ready first
_db_dir = tempfile.mkdtemp(prefix="friendship-quiz-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["JWT_SECRET"] = "test-secret-key"
os.environ["STORE_BACKEND"] = "sql"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import fakeredis  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import app.models  # noqa: E402,F401
from app.database import Base, engine, SessionLocal  # noqa: E402
from app.main import app as fastapi_app  # noqa: E402
from app.stores import SQLStore, RedisStore  # noqa: E402
from app.utils.rate_limiter import rate_limiter  # noqa: E402


@pytest.fixture(autouse=True)
def reset_state():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    rate_limiter.reset()
    yield


@pytest.fixture
def client():
    return TestClient(fastapi_app)


@pytest.fixture
def db_session():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def sql_store(db_session):
    return SQLStore(db_session)


@pytest.fixture
def redis_store():
    return RedisStore(fakeredis.FakeRedis(decode_responses=True))


@pytest.fixture(params=["sql", "redis"])
def store(request):
    """Every store adapter, for behaviour that must not differ between them"""
    return request.getfixturevalue(f"{request.param}_store")


def make_question(text="Favourite colour?", correct=0, options=None):
    return {
        "question": text,
        "options": options or ["Red", "Green", "Blue", "Yellow"],
        "correctAnswer": correct,
    }


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a user over HTTP and return (token, user)"""

    def _register(name="Alice", email="alice@example.com", password="secret123"):
        response = client.post("/auth/register", json={
            "name": name,
            "email": email,
            "password": password,
            "confirmPassword": password,
        })
        assert response.status_code == 201, response.text
        body = response.json()
        return body["token"], body["user"]

    return _register


@pytest.fixture
def create_quiz(client):
    """Create a quiz over HTTP and return its summary"""

    def _create_quiz(token, questions=None, title="Colors", creator_name="Alice"):
        response = client.post("/quizzes", headers=auth_header(token), json={
            "title": title,
            "creatorName": creator_name,
            "questions": questions if questions is not None else [make_question()],
        })
        assert response.status_code == 201, response.text
        return response.json()["quiz"]

    return _create_quiz


@pytest.fixture(params=["sql", "redis"])
def backend(request, monkeypatch):
    """Route HTTP requests to each store backend through get_store"""
    from app.api import deps
    from app.config import settings

    if request.param == "redis":
        monkeypatch.setattr(settings, "STORE_BACKEND", "redis")
        monkeypatch.setattr(deps, "_redis_store", request.getfixturevalue("redis_store"))
    return request.param
