from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from makeandcut.accounts.accounts_repository import InMemoryAccountStore
from makeandcut.main import create_app


@pytest.fixture
def account_store() -> InMemoryAccountStore:
    return InMemoryAccountStore()


@pytest.fixture
def client(app_config, fake_store, account_store) -> TestClient:
    app = create_app(app_config, store=fake_store, account_store=account_store)
    return TestClient(app)


def test_register_returns_201(client: TestClient, account_store) -> None:
    response = client.post(
        "/api/register", json={"email": "a@example.com", "password": "pw"}
    )

    assert response.status_code == 201
    assert response.json() == {"success": True}
    assert len(account_store) == 1


def test_register_duplicate_returns_409(client: TestClient) -> None:
    client.post("/api/register", json={"email": "a@example.com", "password": "first"})

    response = client.post(
        "/api/register", json={"email": "a@example.com", "password": "second"}
    )

    assert response.status_code == 409
    login = client.post("/api/login", json={"email": "a@example.com", "password": "first"})
    assert login.status_code == 200


def test_register_missing_field_returns_400(client: TestClient) -> None:
    response = client.post("/api/register", json={"email": "a@example.com"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


def test_login_returns_user_profile(client: TestClient) -> None:
    client.post("/api/register", json={"email": "a@example.com", "password": "pw"})

    response = client.post("/api/login", json={"email": "a@example.com", "password": "pw"})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "user": {"email": "a@example.com", "plan": "free", "videosProcessed": 0},
    }


def test_login_failures_share_one_response(client: TestClient) -> None:
    client.post("/api/register", json={"email": "a@example.com", "password": "pw"})

    wrong_password = client.post(
        "/api/login", json={"email": "a@example.com", "password": "nope"}
    )
    unknown_email = client.post(
        "/api/login", json={"email": "ghost@example.com", "password": "pw"}
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
