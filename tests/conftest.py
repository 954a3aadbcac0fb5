# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

os.environ["ARCHIVE_SCHEDULER_ENABLED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["DEEPSEEK_API_KEY"] = ""
os.environ.setdefault("LOG_LEVEL", "WARNING")

from placehub.core.auth import create_access_token
from placehub.db import mongodb
from placehub.main import app as fastapi_app
from placehub.services import realtime_hub
from placehub.services.realtime_hub import ConnectionHub


@pytest.fixture(autouse=True)
def mongo_db(monkeypatch: pytest.MonkeyPatch):
    """Fresh in-memory database per test, wired into get_mongo_db()."""
    db = AsyncMongoMockClient()["placehub_test"]
    monkeypatch.setattr(mongodb, "_db", db)
    yield db


@pytest.fixture(autouse=True)
def hub(monkeypatch: pytest.MonkeyPatch) -> ConnectionHub:
    fresh = ConnectionHub()
    monkeypatch.setattr(realtime_hub, "_hub", fresh)
    return fresh


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def admin_headers() -> dict[str, str]:
    token = create_access_token({"userId": "admin-1", "role": "admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def question(client: TestClient) -> dict:
    response = client.post(
        "/api/questions",
        json={"text": "How hard was the DSA round?", "sessionId": "s1"},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture()
def answer_body():
    """Factory for a valid answer payload (camelCase, as the front end sends it)."""
    def _make(question_id: str, **overrides) -> dict:
        body = {
            "questionId": question_id,
            "text": "Medium difficulty",
            "senderIcon": "🦊",
            "sessionId": "s2",
        }
        body.update(overrides)
        return body
    return _make
