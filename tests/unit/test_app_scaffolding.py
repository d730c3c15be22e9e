"""Smoke tests ensuring the application factory wires every router."""

from __future__ import annotations

from typing import Iterable

from fastapi import FastAPI
from fastapi.testclient import TestClient

from makeandcut.cuts.cut_service import CutPipeline
from makeandcut.main import create_app


def _collect_route_signatures(app: FastAPI) -> set[tuple[str, str]]:
    signatures: set[tuple[str, str]] = set()
    for route in app.routes:
        methods: Iterable[str] = getattr(route, "methods", []) or []
        for method in methods:
            signatures.add((route.path, method.upper()))
    return signatures


def test_create_app_exposes_expected_routes(app_config, fake_store) -> None:
    app = create_app(app_config, store=fake_store)

    assert isinstance(app.state.cut_pipeline, CutPipeline)
    signatures = _collect_route_signatures(app)
    expected = {
        ("/", "GET"),
        ("/api/upload", "POST"),
        ("/api/cut-video", "POST"),
        ("/api/video-info", "POST"),
        ("/api/cut-video-multiple", "POST"),
        ("/api/register", "POST"),
        ("/api/login", "POST"),
        ("/api/create-checkout-session", "POST"),
        ("/api/checkout-session/{session_id}", "GET"),
        ("/api/webhook", "POST"),
    }
    assert expected <= signatures


def test_root_reports_health(app_config, fake_store) -> None:
    client = TestClient(create_app(app_config, store=fake_store))

    response = client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["message"]
    assert body["timestamp"]


def test_cors_allows_configured_origin(app_config, fake_store) -> None:
    client = TestClient(create_app(app_config, store=fake_store))

    response = client.options(
        "/api/upload",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_create_app_builds_cloudinary_store_by_default(app_config) -> None:
    app = create_app(app_config)

    store = app.state.cut_pipeline.store
    assert store.delivery_root == "https://res.cloudinary.com/demo/video/upload"
