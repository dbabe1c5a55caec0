"""Integration tests for registration, login and account settings."""
from __future__ import annotations

import os
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete, select

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_socialhub.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from socialhub.database import Base, SessionLocal, engine  # noqa: E402
from socialhub.main import app  # noqa: E402
from socialhub.models import Comment, GroupMessage, Like, Message, Post, User  # noqa: E402


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        for model in (Like, Comment, Post, Message, GroupMessage, User):
            session.execute(delete(model))
        session.commit()
    yield


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


def _register(client: TestClient, **overrides) -> dict:
    payload = {
        "email": "nova@example.com",
        "username": "nova",
        "password": "starlight",
        "role": "TYPE_2",
    }
    payload.update(overrides)
    response = client.post("/auth/register", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_register_applies_account_defaults(client):
    body = _register(client)

    user = body["user"]
    assert body["token_type"] == "bearer"
    assert body["access_token"]
    assert user["display_name"] == "nova"
    assert user["avatar_url"] == "https://api.dicebear.com/7.x/avataaars/svg?seed=nova"
    assert user["role"] == "TYPE_2"
    assert user["frame_style"] == "NONE"
    assert user["is_online"] is True
    assert user["is_shiny"] is False
    assert user["is_verified"] is False
    assert "hashed_password" not in user

    with SessionLocal() as session:
        stored = session.scalar(select(User).where(User.username == "nova"))
        assert stored is not None
        assert stored.hashed_password != "starlight"


def test_register_rejects_duplicate_email_and_username(client):
    _register(client)

    duplicate_email = client.post(
        "/auth/register",
        json={"email": "NOVA@example.com", "username": "other", "password": "starlight"},
    )
    assert duplicate_email.status_code == 409
    assert duplicate_email.json()["detail"] == "Email already registered"

    duplicate_username = client.post(
        "/auth/register",
        json={"email": "else@example.com", "username": "nova", "password": "starlight"},
    )
    assert duplicate_username.status_code == 409
    assert duplicate_username.json()["detail"] == "Username already in use"


def test_register_accepts_non_ascii_username(client):
    body = _register(client, email="zoe@example.com", username="zoë_سارة")

    assert body["user"]["username"] == "zoë_سارة"


def test_register_refuses_admin_role(client):
    response = client.post(
        "/auth/register",
        json={"email": "root@example.com", "username": "root", "password": "starlight", "role": "ADMIN"},
    )
    assert response.status_code == 422


def test_login_and_logout_track_presence(client):
    _register(client)

    wrong = client.post("/auth/login", json={"email": "nova@example.com", "password": "nope-nope"})
    assert wrong.status_code == 401
    assert wrong.json()["detail"] == "Invalid email or password"

    login = client.post("/auth/login", json={"email": "nova@example.com", "password": "starlight"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = client.get("/auth/me", headers=_auth(token))
    assert me.status_code == 200
    assert me.json()["username"] == "nova"

    logout = client.post("/auth/logout", headers=_auth(token))
    assert logout.status_code == 204
    with SessionLocal() as session:
        stored = session.scalar(select(User).where(User.username == "nova"))
        assert stored.is_online is False


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers=_auth("garbage")).status_code == 401


def test_profile_update_ignores_privileged_fields(client):
    token = _register(client)["access_token"]

    response = client.patch(
        "/auth/me",
        headers=_auth(token),
        json={
            "display_name": "Nova Prime",
            "bio": "  orbiting  ",
            "role": "ADMIN",
            "frame_style": "GOLD",
            "is_shiny": True,
            "is_verified": True,
        },
    )
    assert response.status_code == 200
    user = response.json()
    assert user["display_name"] == "Nova Prime"
    assert user["bio"] == "orbiting"
    assert user["role"] == "TYPE_2"
    assert user["frame_style"] == "NONE"
    assert user["is_shiny"] is False
    assert user["is_verified"] is False


def test_profile_update_blank_display_name_falls_back_to_username(client):
    token = _register(client)["access_token"]

    response = client.patch("/auth/me", headers=_auth(token), json={"display_name": "   ", "avatar_url": ""})
    assert response.status_code == 200
    assert response.json()["display_name"] == "nova"
    assert response.json()["avatar_url"].endswith("seed=nova")


def test_change_password_flow(client):
    token = _register(client)["access_token"]

    wrong_current = client.post(
        "/auth/password",
        headers=_auth(token),
        json={"current_password": "bad", "new_password": "newstar", "confirm_password": "newstar"},
    )
    assert wrong_current.status_code == 400

    mismatch = client.post(
        "/auth/password",
        headers=_auth(token),
        json={"current_password": "starlight", "new_password": "newstar", "confirm_password": "newstat"},
    )
    assert mismatch.status_code == 400
    assert mismatch.json()["detail"] == "Passwords do not match"

    too_short = client.post(
        "/auth/password",
        headers=_auth(token),
        json={"current_password": "starlight", "new_password": "abc", "confirm_password": "abc"},
    )
    assert too_short.status_code == 422

    ok = client.post(
        "/auth/password",
        headers=_auth(token),
        json={"current_password": "starlight", "new_password": "newstar", "confirm_password": "newstar"},
    )
    assert ok.status_code == 204

    relogin = client.post("/auth/login", json={"email": "nova@example.com", "password": "newstar"})
    assert relogin.status_code == 200
