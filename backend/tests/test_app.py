"""App-level behaviour: health, error envelope, body size limit, handler boundary."""

import json
import logging

import pytest
from fastapi.testclient import TestClient

from prompthub.config import Settings
from prompthub.database import Database
from prompthub.errors import NotFound, Unexpected, guarded
from prompthub.main import create_app
from prompthub.services import prompt_service

from conftest import auth_headers


def test_health(client: TestClient):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_body_over_limit_is_413(settings: Settings, database: Database, user):
    small = settings.model_copy(update={"max_body_bytes": 64})
    app = create_app(small, database=database)
    with TestClient(app) as client:
        response = client.post(
            "/api/prompts/save",
            json={"topic": "t", "prompt": "x" * 200},
            headers=auth_headers(user),
        )
    assert response.status_code == 413
    assert response.json() == {"error": "요청 크기가 너무 큽니다"}


def _chunked(payload: bytes, size: int = 16):
    for start in range(0, len(payload), size):
        yield payload[start:start + size]


def test_chunked_body_over_limit_is_413(settings: Settings, database: Database, user):
    small = settings.model_copy(update={"max_body_bytes": 64})
    app = create_app(small, database=database)
    payload = json.dumps({"topic": "t", "prompt": "x" * 1000}).encode()
    with TestClient(app) as client:
        response = client.post(
            "/api/prompts/save",
            content=_chunked(payload),
            headers={**auth_headers(user), "Content-Type": "application/json"},
        )
    assert response.status_code == 413
    assert response.json() == {"error": "요청 크기가 너무 큽니다"}


def test_chunked_body_under_limit_is_accepted(settings: Settings, database: Database, user):
    small = settings.model_copy(update={"max_body_bytes": 1024})
    app = create_app(small, database=database)
    payload = json.dumps({"topic": "Chunked", "prompt": "streamed body"}).encode()
    with TestClient(app) as client:
        response = client.post(
            "/api/prompts/save",
            content=_chunked(payload),
            headers={**auth_headers(user), "Content-Type": "application/json"},
        )
    assert response.status_code == 200
    assert response.json()["prompt"]["topic"] == "Chunked"


def test_large_inline_image_under_limit_is_accepted(client: TestClient, user):
    image = "data:image/png;base64," + "A" * 200_000
    response = client.post(
        "/api/prompts/save",
        json={"topic": "Poster", "prompt": "Design a poster", "imageUrl": image},
        headers=auth_headers(user),
    )
    assert response.status_code == 200
    assert response.json()["prompt"]["imageUrl"] == image


def test_non_integer_path_id_is_400(client: TestClient, user):
    response = client.get("/api/prompts/not-a-number", headers=auth_headers(user))
    assert response.status_code == 400
    assert response.json() == {"error": "잘못된 요청입니다"}


def test_unexpected_failure_is_generic_500(client: TestClient, user, monkeypatch, caplog):
    def boom(*args, **kwargs):
        raise RuntimeError("SELECT secret FROM internals")

    monkeypatch.setattr(prompt_service, "find_public_prompts", boom)

    with caplog.at_level(logging.ERROR):
        response = client.get("/api/prompts/public")

    assert response.status_code == 500
    body = response.json()
    assert body == {"error": "프롬프트 목록을 불러오는데 실패했습니다"}
    assert "internals" not in response.text
    assert "prompts.public" in caplog.text


class TestGuarded:
    def test_api_errors_pass_through(self):
        with pytest.raises(NotFound):
            with guarded("ctx"):
                raise NotFound()

    def test_other_errors_become_unexpected(self):
        with pytest.raises(Unexpected) as exc:
            with guarded("ctx", "실패"):
                raise KeyError("x")
        assert exc.value.status_code == 500
        assert exc.value.message == "실패"
        assert isinstance(exc.value.__cause__, KeyError)
