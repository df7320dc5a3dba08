import re

import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.main import app as fastapi_app
from app.services.quiz_service import quiz_service
from conftest import auth_header, make_question


def contains_key(value, key):
    """Search nested JSON for a key at any depth"""
    if isinstance(value, dict):
        return key in value or any(contains_key(v, key) for v in value.values())
    if isinstance(value, list):
        return any(contains_key(v, key) for v in value)
    return False


def submit(client, quiz_id, answers, name="Bob"):
    return client.post(f"/quizzes/{quiz_id}/responses", json={
        "respondentName": name,
        "answers": answers,
    })


# Creation

def test_create_quiz_returns_summary_with_code(client, register):
    token, _ = register()

    response = client.post("/quizzes", headers=auth_header(token), json={
        "title": "Colors",
        "creatorName": "Alice",
        "questions": [make_question(correct=2), make_question(correct=1)],
    })

    assert response.status_code == 201
    quiz = response.json()["quiz"]
    assert re.match(r"^[0-9A-Z]{8}$", quiz["code"])
    assert quiz["title"] == "Colors"
    assert quiz["creator"] == "Alice"
    assert quiz["questionsCount"] == 2
    assert "createdAt" in quiz
    assert not contains_key(response.json(), "correctAnswer")


@pytest.mark.parametrize("count", [1, 10])
def test_question_count_boundaries_accepted(client, register, count):
    token, _ = register()

    response = client.post("/quizzes", headers=auth_header(token), json={
        "title": "Boundary",
        "creatorName": "Alice",
        "questions": [make_question(text=f"Q{i}") for i in range(count)],
    })

    assert response.status_code == 201
    assert response.json()["quiz"]["questionsCount"] == count


@pytest.mark.parametrize("count", [0, 11])
def test_question_count_boundaries_rejected(client, register, count):
    token, _ = register()

    response = client.post("/quizzes", headers=auth_header(token), json={
        "title": "Boundary",
        "creatorName": "Alice",
        "questions": [make_question(text=f"Q{i}") for i in range(count)],
    })

    assert response.status_code == 400
    assert response.json() == {"message": "Quiz must have 1-10 questions"}


@pytest.mark.parametrize("question", [
    make_question(options=["a", "b", "c"]),
    make_question(options=["a", "b", "c", "d", "e"]),
    make_question(correct=4),
    make_question(correct=-1),
    make_question(options=["a", "", "c", "d"]),
    {"question": "Q", "options": ["a", "b", "c", "d"], "correctAnswer": "1"},
    {"question": "Q", "options": ["a", "b", "c", "d"], "correctAnswer": True},
    {"question": "", "options": ["a", "b", "c", "d"], "correctAnswer": 0},
    {"options": ["a", "b", "c", "d"], "correctAnswer": 0},
    "not a question",
])
def test_malformed_questions_rejected(client, register, question):
    token, _ = register()

    response = client.post("/quizzes", headers=auth_header(token), json={
        "title": "Broken",
        "creatorName": "Alice",
        "questions": [question],
    })

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid question format"}


@pytest.mark.parametrize("body", [
    {"creatorName": "Alice", "questions": [make_question()]},
    {"title": "  ", "creatorName": "Alice", "questions": [make_question()]},
    {"title": "Colors", "questions": [make_question()]},
    {"title": "Colors", "creatorName": "Alice"},
])
def test_create_quiz_requires_fields(client, register, body):
    token, _ = register()

    response = client.post("/quizzes", headers=auth_header(token), json=body)

    assert response.status_code == 400
    assert response.json() == {"message": "Title, creator name, and questions are required"}


def test_create_quiz_requires_token(client):
    response = client.post("/quizzes", json={
        "title": "Colors", "creatorName": "Alice", "questions": [make_question()],
    })

    assert response.status_code == 401


# Public view

def test_public_quiz_lookup_is_case_insensitive_and_hides_answers(client, register, create_quiz):
    token, _ = register()
    quiz = create_quiz(token, questions=[make_question(correct=3)])
    submit(client, quiz["id"], [3])

    response = client.get(f"/quizzes/code/{quiz['code'].lower()}")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == quiz["id"]
    assert body["code"] == quiz["code"]
    assert body["questions"] == [{
        "question": "Favourite colour?",
        "options": ["Red", "Green", "Blue", "Yellow"],
    }]
    assert not contains_key(body, "correctAnswer")
    assert not contains_key(body, "responses")


def test_public_quiz_unknown_code(client):
    response = client.get("/quizzes/code/NOPE1234")

    assert response.status_code == 404
    assert response.json() == {"message": "Quiz not found"}


# Submissions

def test_submit_scores_response(client, register, create_quiz):
    token, _ = register()
    quiz = create_quiz(token, questions=[
        make_question(text="Q1", correct=0),
        make_question(text="Q2", correct=1),
        make_question(text="Q3", correct=2),
        make_question(text="Q4", correct=3),
    ])

    response = submit(client, quiz["id"], [0, 1, 2, 0], name="  Bob  ")

    assert response.status_code == 200
    body = response.json()
    assert body["score"] == 3
    assert body["percentage"] == 75
    assert body["totalQuestions"] == 4
    assert body["respondentName"] == "Bob"
    assert body["responseId"]
    assert not contains_key(body, "correctAnswer")


def test_submit_one_of_three(client, register, create_quiz):
    token, _ = register()
    quiz = create_quiz(token, questions=[make_question(text=f"Q{i}", correct=1) for i in range(3)])

    body = submit(client, quiz["id"], [1, 0, 0]).json()

    assert (body["score"], body["percentage"]) == (1, 33)


def test_submit_wrong_answer_count(client, register, create_quiz):
    token, _ = register()
    quiz = create_quiz(token, questions=[make_question(), make_question()])

    response = submit(client, quiz["id"], [0])

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid number of answers"}


@pytest.mark.parametrize("body", [
    {"answers": [0]},
    {"respondentName": "   ", "answers": [0]},
    {"respondentName": "Bob"},
])
def test_submit_requires_name_and_answers(client, register, create_quiz, body):
    token, _ = register()
    quiz = create_quiz(token)

    response = client.post(f"/quizzes/{quiz['id']}/responses", json=body)

    assert response.status_code == 400
    assert response.json() == {"message": "Respondent name and answers are required"}


@pytest.mark.parametrize("answer", [True, "1", "red", 1.5, 4, -1, 99])
def test_submit_rejects_answers_that_are_not_option_indices(client, register, create_quiz, answer):
    token, _ = register()
    quiz = create_quiz(token, questions=[make_question(correct=1)])

    response = submit(client, quiz["id"], [answer])

    assert response.status_code == 400
    assert response.json()["message"].startswith("answers.0")
    listed = client.get("/quizzes", headers=auth_header(token)).json()
    assert listed[0]["responsesCount"] == 0


@pytest.mark.parametrize("quiz_id", ["does-not-exist", "00000000-0000-0000-0000-000000000000"])
def test_submit_to_unknown_quiz(client, quiz_id):
    response = submit(client, quiz_id, [0])

    assert response.status_code == 404
    assert response.json() == {"message": "Quiz not found"}


def test_submit_needs_no_token(client, register, create_quiz):
    token, _ = register()
    quiz = create_quiz(token)

    response = submit(client, quiz["id"], [0])

    assert response.status_code == 200


# Owner views

def test_colors_scenario(client, register, create_quiz):
    token, _ = register()
    quiz = create_quiz(token, title="Colors", questions=[
        make_question(text="Sky?", correct=2),
        make_question(text="Grass?", correct=1),
    ])

    result = submit(client, quiz["id"], [2, 0]).json()
    assert result["score"] == 1
    assert result["percentage"] == 50

    response = client.get(
        f"/quizzes/{quiz['id']}/responses/{result['responseId']}",
        headers=auth_header(token),
    )

    assert response.status_code == 200
    detail = response.json()
    assert detail["respondent"] == "Bob"
    assert detail["score"] == 1
    assert detail["percentage"] == 50
    assert [q["isCorrect"] for q in detail["questions"]] == [True, False]
    assert [q["userAnswer"] for q in detail["questions"]] == [2, 0]
    assert [q["correctAnswer"] for q in detail["questions"]] == [2, 1]
    assert detail["questions"][0]["question"] == "Sky?"


def test_detailed_result_forbidden_for_other_user(client, register, create_quiz):
    owner_token, _ = register()
    other_token, _ = register(name="Mallory", email="mallory@example.com")
    quiz = create_quiz(owner_token)
    result = submit(client, quiz["id"], [0]).json()

    response = client.get(
        f"/quizzes/{quiz['id']}/responses/{result['responseId']}",
        headers=auth_header(other_token),
    )

    assert response.status_code == 403
    assert response.json() == {"message": "Access denied"}


def test_detailed_result_requires_token(client, register, create_quiz):
    token, _ = register()
    quiz = create_quiz(token)
    result = submit(client, quiz["id"], [0]).json()

    response = client.get(f"/quizzes/{quiz['id']}/responses/{result['responseId']}")

    assert response.status_code == 401
    assert response.json() == {"message": "Access token required"}


def test_detailed_result_unknown_response(client, register, create_quiz):
    token, _ = register()
    quiz = create_quiz(token)

    response = client.get(
        f"/quizzes/{quiz['id']}/responses/missing",
        headers=auth_header(token),
    )

    assert response.status_code == 404
    assert response.json() == {"message": "Response not found"}


def test_list_returns_only_own_quizzes_without_answers(client, register, create_quiz):
    alice_token, _ = register()
    bob_token, _ = register(name="Bob", email="bob@example.com")
    first = create_quiz(alice_token, title="First")
    second = create_quiz(alice_token, title="Second")
    create_quiz(bob_token, title="Bob's")
    submit(client, first["id"], [0], name="Carol")

    response = client.get("/quizzes", headers=auth_header(alice_token))

    assert response.status_code == 200
    quizzes = response.json()
    assert [q["id"] for q in quizzes] == [second["id"], first["id"]]
    assert not contains_key(quizzes, "correctAnswer")

    listed_first = quizzes[1]
    assert listed_first["questionsCount"] == 1
    assert listed_first["responsesCount"] == 1
    assert listed_first["responses"][0]["respondentName"] == "Carol"
    assert listed_first["responses"][0]["percentage"] == 100
    assert not contains_key(listed_first["responses"], "answers")


def test_list_requires_token(client):
    assert client.get("/quizzes").status_code == 401


# Deletion

def test_delete_is_soft_and_hides_quiz(client, register, create_quiz):
    token, _ = register()
    quiz = create_quiz(token)
    submit(client, quiz["id"], [0])

    response = client.delete(f"/quizzes/{quiz['id']}", headers=auth_header(token))

    assert response.status_code == 200
    assert response.json() == {"message": "Quiz deleted successfully"}
    assert client.get(f"/quizzes/code/{quiz['code']}").status_code == 404
    assert submit(client, quiz["id"], [0]).status_code == 404
    assert client.get("/quizzes", headers=auth_header(token)).json() == []
    assert client.delete(f"/quizzes/{quiz['id']}", headers=auth_header(token)).status_code == 404


def test_delete_keeps_responses_in_store(client, register, create_quiz, sql_store):
    token, _ = register()
    quiz = create_quiz(token)
    submit(client, quiz["id"], [0])

    client.delete(f"/quizzes/{quiz['id']}", headers=auth_header(token))

    stored = sql_store.get_quiz(quiz["id"])
    assert stored.is_active is False
    assert len(stored.responses) == 1
    assert sql_store.code_exists(quiz["code"])


def test_delete_forbidden_for_other_user(client, register, create_quiz):
    owner_token, _ = register()
    other_token, _ = register(name="Mallory", email="mallory@example.com")
    quiz = create_quiz(owner_token)

    response = client.delete(f"/quizzes/{quiz['id']}", headers=auth_header(other_token))

    assert response.status_code == 403
    assert client.get(f"/quizzes/code/{quiz['code']}").status_code == 200


# Surface

def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "OK"
    assert "timestamp" in response.json()


def test_unknown_route(client):
    response = client.get("/does/not/exist")

    assert response.status_code == 404
    assert response.json() == {"message": "Route not found"}


def test_unhandled_error_is_generic(monkeypatch):
    def explode(store, code):
        raise RuntimeError("connection to db-primary:5432 refused")

    monkeypatch.setattr(quiz_service, "get_public_quiz", explode)
    client = TestClient(fastapi_app, raise_server_exceptions=False)

    response = client.get("/quizzes/code/ABCDEFGH")

    assert response.status_code == 500
    assert response.json() == {"message": "Something went wrong!"}


@pytest.mark.parametrize("path", ["/health", "/does/not/exist", "/quizzes/code/NOPE1234"])
def test_security_headers_on_every_response(client, path):
    response = client.get(path)

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "Strict-Transport-Security" in response.headers


def test_oversized_body_is_rejected(client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_BODY_BYTES", 100)

    response = client.post("/auth/register", json={"name": "x" * 200})

    assert response.status_code == 413
    assert response.json() == {"message": "Request body too large"}
