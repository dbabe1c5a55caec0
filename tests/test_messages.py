"""Integration tests for direct messages and the global group chat."""
from __future__ import annotations

import os
from typing import Callable, Iterator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete, select

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_socialhub.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from socialhub.database import Base, SessionLocal, engine  # noqa: E402
from socialhub.main import app  # noqa: E402
from socialhub.models import Comment, GroupMessage, Like, Message, Post, User  # noqa: E402
from socialhub.services import get_current_user  # noqa: E402


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
def user_factory() -> Callable[[str], User]:
    def _factory(username: str) -> User:
        with SessionLocal() as session:
            user = User(email=f"{username}@example.com", username=username, hashed_password="test-hash")
            session.add(user)
            session.commit()
            session.refresh(user)
            return user
    return _factory


@pytest.fixture
def authed_client() -> Iterator[Callable[[User], TestClient]]:
    with TestClient(app) as client:
        def _with_user(user: User) -> TestClient:
            def _override() -> User:
                return user
            app.dependency_overrides[get_current_user] = _override
            return client
        yield _with_user
    app.dependency_overrides.clear()


def _send(client: TestClient, receiver: User, content: str | None = None, image_url: str | None = None):
    return client.post(
        "/messages/",
        json={"receiver_id": str(receiver.id), "content": content, "image_url": image_url},
    )


def test_conversations_group_by_counterpart(authed_client, user_factory):
    ada = user_factory("ada")
    bob = user_factory("bob")
    cyd = user_factory("cyd")

    assert _send(authed_client(bob), ada, "hi ada").status_code == 201
    assert _send(authed_client(bob), ada, "still there?").status_code == 201
    assert _send(authed_client(ada), cyd, "ping").status_code == 201
    assert _send(authed_client(cyd), ada, "pong").status_code == 201

    conversations = authed_client(ada).get("/messages/conversations").json()["items"]
    assert [entry["user"]["username"] for entry in conversations] == ["cyd", "bob"]
    assert conversations[0]["last_message"]["content"] == "pong"
    assert conversations[0]["unread_count"] == 1
    assert conversations[1]["last_message"]["content"] == "still there?"
    assert conversations[1]["unread_count"] == 2

    assert authed_client(ada).get("/messages/unread").json() == {"unread": 3}


def test_opening_thread_marks_it_read_idempotently(authed_client, user_factory):
    ada = user_factory("ada")
    bob = user_factory("bob")
    _send(authed_client(bob), ada, "one")
    _send(authed_client(ada), bob, "two")
    _send(authed_client(bob), ada, "three")

    client = authed_client(ada)
    thread = client.get(f"/messages/{bob.id}").json()
    assert [message["content"] for message in thread["messages"]] == ["one", "two", "three"]
    assert thread["other_user_id"] == str(bob.id)

    with SessionLocal() as session:
        inbound = session.scalars(select(Message).where(Message.receiver_id == ada.id)).all()
        assert inbound and all(message.is_read for message in inbound)
        outbound = session.scalars(select(Message).where(Message.receiver_id == bob.id)).all()
        assert not any(message.is_read for message in outbound)

    assert client.post(f"/messages/{bob.id}/read").json() == {"updated": 0}
    client.get(f"/messages/{bob.id}")
    with SessionLocal() as session:
        inbound = session.scalars(select(Message).where(Message.receiver_id == ada.id)).all()
        assert all(message.is_read for message in inbound)


def test_mark_read_reports_updated_rows(authed_client, user_factory):
    ada = user_factory("ada")
    bob = user_factory("bob")
    _send(authed_client(bob), ada, "a")
    _send(authed_client(bob), ada, "b")

    assert authed_client(ada).post(f"/messages/{bob.id}/read").json() == {"updated": 2}
    assert authed_client(ada).post(f"/messages/{bob.id}/read").json() == {"updated": 0}


def test_send_message_validation(authed_client, user_factory):
    ada = user_factory("ada")
    bob = user_factory("bob")
    client = authed_client(ada)

    assert _send(client, bob).status_code == 422
    assert _send(client, ada, "talking to myself").status_code == 400

    ghost = client.post("/messages/", json={"receiver_id": str(uuid4()), "content": "anyone?"})
    assert ghost.status_code == 404

    image_only = _send(client, bob, image_url="https://i.example/cat.png")
    assert image_only.status_code == 201
    assert image_only.json()["content"] is None
    assert image_only.json()["is_read"] is False


def test_group_chat_pages_back_from_newest(authed_client, user_factory):
    ada = user_factory("ada")
    client = authed_client(ada)
    for index in range(5):
        assert client.post("/group-chat/messages", json={"content": f"m{index}"}).status_code == 201

    latest = client.get("/group-chat/messages", params={"limit": 3}).json()
    assert [message["content"] for message in latest["messages"]] == ["m2", "m3", "m4"]
    assert latest["has_more"] is True
    assert latest["messages"][0]["sender"]["username"] == "ada"

    older = client.get("/group-chat/messages", params={"page": 2, "limit": 3}).json()
    assert [message["content"] for message in older["messages"]] == ["m0", "m1"]
    assert older["has_more"] is False


def test_group_chat_rejects_empty_message(authed_client, user_factory):
    client = authed_client(user_factory("ada"))
    assert client.post("/group-chat/messages", json={"content": "  "}).status_code == 422
    image = client.post("/group-chat/messages", json={"image_url": "https://i.example/x.png"})
    assert image.status_code == 201
