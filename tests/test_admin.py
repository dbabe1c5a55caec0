"""Integration tests for the administrator console."""
from __future__ import annotations

import os
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete

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
def user_factory() -> Callable[..., User]:
    def _factory(username: str, *, role: str = "TYPE_1", online: bool = False) -> User:
        with SessionLocal() as session:
            user = User(
                email=f"{username}@example.com",
                username=username,
                hashed_password="test-hash",
                role=role,
                is_online=online,
            )
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


def test_admin_routes_forbid_ordinary_roles(authed_client, user_factory):
    member = user_factory("member", role="TYPE_3")
    client = authed_client(member)

    assert client.get("/admin/users").status_code == 403
    assert client.get("/admin/stats").status_code == 403
    assert client.patch(f"/admin/users/{member.id}", json={"is_verified": True}).status_code == 403
    assert client.delete(f"/admin/users/{member.id}").status_code == 403


def test_admin_updates_role_and_decorations(authed_client, user_factory):
    admin = user_factory("chief", role="ADMIN")
    member = user_factory("member")
    client = authed_client(admin)

    response = client.patch(
        f"/admin/users/{member.id}",
        json={"role": "TYPE_3", "frame_style": "NEON", "is_shiny": True, "is_verified": True},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "TYPE_3"
    assert body["frame_style"] == "NEON"
    assert body["is_shiny"] is True
    assert body["is_verified"] is True

    invalid = client.patch(f"/admin/users/{member.id}", json={"frame_style": "RAINBOW"})
    assert invalid.status_code == 422


def test_final_admin_cannot_be_demoted(authed_client, user_factory):
    admin = user_factory("chief", role="ADMIN")
    client = authed_client(admin)

    refused = client.patch(f"/admin/users/{admin.id}", json={"role": "TYPE_1"})
    assert refused.status_code == 400

    deputy = user_factory("deputy", role="ADMIN")
    allowed = client.patch(f"/admin/users/{deputy.id}", json={"role": "TYPE_2"})
    assert allowed.status_code == 200
    assert allowed.json()["role"] == "TYPE_2"


def test_admin_search_and_delete_cascades(authed_client, user_factory):
    admin = user_factory("chief", role="ADMIN")
    target = user_factory("spammer")
    user_factory("bystander")

    target_client = authed_client(target)
    post_id = target_client.post("/posts/", json={"content": "buy now"}).json()["id"]
    target_client.post("/group-chat/messages", json={"content": "buy now"})

    client = authed_client(admin)
    found = client.get("/admin/users", params={"search": "SPAM"}).json()["items"]
    assert [user["username"] for user in found] == ["spammer"]

    assert client.delete(f"/admin/users/{admin.id}").status_code == 400
    assert client.delete(f"/admin/users/{target.id}").status_code == 204
    assert client.get(f"/posts/{post_id}").status_code == 404

    with SessionLocal() as session:
        assert session.get(User, target.id) is None
        assert session.query(GroupMessage).count() == 0


def test_admin_can_remove_any_post(authed_client, user_factory):
    admin = user_factory("chief", role="ADMIN")
    author = user_factory("author")
    post_id = authed_client(author).post("/posts/", json={"content": "edgy"}).json()["id"]

    assert authed_client(admin).delete(f"/admin/posts/{post_id}").status_code == 204
    assert authed_client(admin).get(f"/posts/{post_id}").status_code == 404


def test_site_stats_counts(authed_client, user_factory):
    admin = user_factory("chief", role="ADMIN", online=True)
    other = user_factory("other")
    client = authed_client(admin)
    client.post("/posts/", json={"content": "announcement"})
    client.post("/messages/", json={"receiver_id": str(other.id), "content": "welcome"})
    client.post("/group-chat/messages", json={"content": "hello all"})

    stats = client.get("/admin/stats").json()
    assert stats == {"users": 2, "posts": 1, "messages": 1, "group_messages": 1, "online_users": 1}
