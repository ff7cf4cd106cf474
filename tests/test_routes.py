import uuid

import pytest
from fastapi.testclient import TestClient
from loguru import logger

from main import create_app


@pytest.fixture
def client(store):
    return TestClient(create_app(store))


def test_put_then_get_words(client):
    response = client.put("/words", json={"word": "ubiquitous", "definition": "present everywhere"})
    assert response.status_code == 200
    created = response.json()
    assert created["word"] == "ubiquitous"
    assert created["definition"] == "present everywhere"
    uuid.UUID(created["id"])

    listed = client.get("/words").json()
    assert listed == [created]


def test_get_words_on_empty_store(client):
    response = client.get("/words")
    assert response.status_code == 200
    assert response.json() == []


def test_put_without_definition_is_rejected(client, session):
    response = client.put("/words", json={"word": "ersatz"})
    assert response.status_code == 422
    assert session.rows == {}


def test_storage_failure_is_a_500_and_app_keeps_serving(client, session):
    session.fail_async = TimeoutError("read timed out")
    assert client.get("/words").status_code == 500
    response = client.put("/words", json={"word": "ersatz", "definition": "substitute"})
    assert response.status_code == 500
    assert response.json() == {"detail": "Word store unavailable"}

    session.fail_async = None
    assert client.get("/words").status_code == 200


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_static_index_is_served(store, tmp_path):
    (tmp_path / "index.html").write_text("<h1>words</h1>")
    client = TestClient(create_app(store, static_dir=str(tmp_path)))

    assert "words" in client.get("/").text
    assert client.get("/words").json() == []


def test_storage_failure_is_logged_once(client, session):
    messages = []
    sink_id = logger.add(messages.append, level="ERROR")
    try:
        session.fail_async = TimeoutError("read timed out")
        client.get("/words")
    finally:
        logger.remove(sink_id)

    assert len(messages) == 1
    assert "read timed out" in messages[0]
