from __future__ import annotations

import structlog
from fastapi.testclient import TestClient

from makeandcut.logging import REDACTED, bind_request_context, redact_secrets
from makeandcut.main import create_app


def test_redact_secrets_masks_credentials() -> None:
    event = {"event": "accounts.register", "email": "a@example.com", "password": "pw", "signature": "abc"}

    redacted = redact_secrets(None, "info", event)

    assert redacted["password"] == REDACTED
    assert redacted["signature"] == REDACTED
    assert redacted["email"] == "a@example.com"


def test_bind_request_context_replaces_previous_request() -> None:
    bind_request_context("POST", "/api/upload", "req-1")
    structlog.contextvars.bind_contextvars(asset_id="abc123")

    bind_request_context("GET", "/")

    assert structlog.contextvars.get_contextvars() == {
        "method": "GET",
        "path": "/",
        "request_id": "-",
    }
    structlog.contextvars.clear_contextvars()


def test_request_middleware_binds_request(app_config, fake_store, monkeypatch) -> None:
    bound: list[tuple[str, str, str | None]] = []
    monkeypatch.setattr(
        "makeandcut.main.bind_request_context",
        lambda method, path, request_id=None: bound.append((method, path, request_id)),
    )
    client = TestClient(create_app(app_config, store=fake_store))

    response = client.get("/", headers={"x-request-id": "req-42"})

    assert response.status_code == 200
    assert bound == [("GET", "/", "req-42")]
