from __future__ import annotations

import pytest
from flask import Flask
from sqlalchemy import select

from tasksapp.app import create_app
from tasksapp.infrastructure.db import models
from tasksapp.shared.config import AppConfig

ANA = {
    "name": "Ana",
    "surname": "Silva",
    "email": "ana@x.com",
    "username": "ana1",
    "password": "pw123",
}


@pytest.fixture()
def app(app_config: AppConfig) -> Flask:
    return create_app(app_config)


def _stored_user(app: Flask) -> models.User:
    container = app.extensions["tasksapp.container"]
    with container.session_factory() as session:
        return session.execute(select(models.User)).scalar_one()


def test_register_login_refresh_flow(app: Flask) -> None:
    with app.test_client() as client:
        register = client.post("/api/auth/register", json=ANA)
        assert register.status_code == 200
        registered = register.get_json()
        assert registered["username"] == "ana1"
        assert client.get_cookie("jwt") is not None
        assert client.get_cookie("refreshToken").value == registered["refresh_token"]

        login = client.post("/api/auth/login", json={"email": "ana@x.com", "password": "pw123"})
        assert login.status_code == 200
        logged_in = login.get_json()
        assert logged_in["refresh_token"] != registered["refresh_token"]

        refresh = client.post("/api/auth/refresh-token", json={"username": "ana1"})
        assert refresh.status_code == 200
        assert refresh.get_json()["refresh_token"] != logged_in["refresh_token"]
        assert client.get_cookie("refreshToken").value == refresh.get_json()["refresh_token"]

    stored = _stored_user(app)
    assert stored.password_hash != "pw123"
    assert stored.refresh_token == refresh.get_json()["refresh_token"]
    assert stored.version == 3


def test_replayed_refresh_token_is_rejected(app: Flask) -> None:
    client = app.test_client(use_cookies=False)
    token = client.post("/api/auth/register", json=ANA).get_json()["refresh_token"]

    first = client.post(
        "/api/auth/refresh-token", json={"username": "ana1", "refresh_token": token}
    )
    replay = client.post(
        "/api/auth/refresh-token", json={"username": "ana1", "refresh_token": token}
    )

    assert first.status_code == 200
    assert replay.status_code == 400
    assert replay.get_json() == {
        "title": "Invalid token.",
        "description": "Refresh token is invalid or expired. Please log in again.",
        "status": 400,
    }


def test_duplicate_registration_reports_conflict(app: Flask) -> None:
    client = app.test_client(use_cookies=False)
    assert client.post("/api/auth/register", json=ANA).status_code == 200

    response = client.post("/api/auth/register", json={**ANA, "email": "other@x.com"})

    assert response.status_code == 400
    assert response.get_json()["conflict"] == "username_taken"


def test_unknown_email_is_404(app: Flask) -> None:
    client = app.test_client(use_cookies=False)

    response = client.post("/api/auth/login", json={"email": "ghost@x.com", "password": "pw"})

    assert response.status_code == 404
    assert response.get_json()["title"] == "User not found."


def test_responses_carry_security_and_correlation_headers(app: Flask) -> None:
    client = app.test_client(use_cookies=False)

    response = client.post(
        "/api/auth/login",
        json={"email": "ghost@x.com", "password": "pw"},
        headers={"X-Request-ID": "req-42"},
    )

    assert response.headers["X-Request-ID"] == "req-42"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["Cache-Control"] == "no-store"


def test_access_token_from_login_opens_current_identity(app: Flask) -> None:
    with app.test_client() as client:
        assert client.get("/api/auth/me").status_code == 401

        client.post("/api/auth/register", json=ANA)
        by_cookie = client.get("/api/auth/me")

    bearer = app.test_client(use_cookies=False)
    access = bearer.post(
        "/api/auth/login", json={"email": "ana@x.com", "password": "pw123"}
    ).get_json()["access_token"]
    by_header = bearer.get("/api/auth/me", headers={"Authorization": f"Bearer {access}"})

    assert by_cookie.status_code == 200
    assert by_cookie.get_json() == {"email": "ana@x.com", "username": "ana1"}
    assert by_header.status_code == 200
    assert by_header.get_json()["username"] == "ana1"
