"""Integration tests for the gallery: posts, reactions, comments and profiles."""
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
def user_factory() -> Callable[..., User]:
    def _factory(username: str, *, role: str = "TYPE_1", bio: str = "") -> User:
        with SessionLocal() as session:
            user = User(
                email=f"{username}@example.com",
                username=username,
                hashed_password="test-hash",
                display_name=username.title(),
                bio=bio,
                role=role,
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


def test_create_post_with_text_or_image(authed_client, user_factory):
    author = user_factory("painter")
    client = authed_client(author)

    text_only = client.post("/posts/", json={"content": "  first light  "})
    assert text_only.status_code == 201
    assert text_only.json()["content"] == "first light"
    assert text_only.json()["author"]["username"] == "painter"

    image_only = client.post("/posts/", json={"content": "", "image_url": "https://i.example/pic.png"})
    assert image_only.status_code == 201
    assert image_only.json()["image_url"] == "https://i.example/pic.png"

    null_text = client.post("/posts/", json={"content": None, "image_url": "https://i.example/other.png"})
    assert null_text.status_code == 201
    assert null_text.json()["content"] == ""

    empty = client.post("/posts/", json={"content": "   ", "image_url": ""})
    assert empty.status_code == 422


def test_feed_is_newest_first_with_has_more_boundary(authed_client, user_factory):
    author = user_factory("chronicler")
    client = authed_client(author)
    for index in range(4):
        assert client.post("/posts/", json={"content": f"post {index}"}).status_code == 201

    first = client.get("/posts/", params={"page": 1, "limit": 2}).json()
    assert [item["content"] for item in first["items"]] == ["post 3", "post 2"]
    assert first["total"] == 4
    assert first["has_more"] is True

    second = client.get("/posts/", params={"page": 2, "limit": 2}).json()
    assert [item["content"] for item in second["items"]] == ["post 1", "post 0"]
    # A full last page still reports more; only a short page ends the feed.
    assert second["has_more"] is True

    third = client.get("/posts/", params={"page": 3, "limit": 2}).json()
    assert third["items"] == []
    assert third["has_more"] is False

    short = client.get("/posts/", params={"page": 1, "limit": 5}).json()
    assert len(short["items"]) == 4
    assert short["has_more"] is False


def test_reaction_toggle_semantics(authed_client, user_factory):
    author = user_factory("sculptor")
    fan = user_factory("fan")
    post_id = authed_client(author).post("/posts/", json={"content": "bronze"}).json()["id"]
    client = authed_client(fan)

    liked = client.post(f"/posts/{post_id}/reactions", json={"type": "LIKE"}).json()
    assert liked["like"]["type"] == "LIKE"
    assert (liked["like_count"], liked["dislike_count"]) == (1, 0)

    flipped = client.post(f"/posts/{post_id}/reactions", json={"type": "DISLIKE"}).json()
    assert flipped["like"]["type"] == "DISLIKE"
    assert (flipped["like_count"], flipped["dislike_count"]) == (0, 1)

    removed = client.post(f"/posts/{post_id}/reactions", json={"type": "DISLIKE"}).json()
    assert removed["like"] is None
    assert (removed["like_count"], removed["dislike_count"]) == (0, 0)

    with SessionLocal() as session:
        assert session.scalars(select(Like)).all() == []

    bad = client.post(f"/posts/{post_id}/reactions", json={"type": "LOVE"})
    assert bad.status_code == 422


def test_comments_are_listed_oldest_first(authed_client, user_factory):
    author = user_factory("poet")
    reader = user_factory("reader")
    post_id = authed_client(author).post("/posts/", json={"content": "haiku"}).json()["id"]
    client = authed_client(reader)

    assert client.post(f"/posts/{post_id}/comments", json={"content": "lovely"}).status_code == 201
    assert client.post(f"/posts/{post_id}/comments", json={"content": "again"}).status_code == 201
    assert client.post(f"/posts/{post_id}/comments", json={"content": "   "}).status_code == 422

    comments = client.get(f"/posts/{post_id}/comments").json()["items"]
    assert [comment["content"] for comment in comments] == ["lovely", "again"]
    assert comments[0]["user"]["username"] == "reader"

    feed_item = client.get("/posts/").json()["items"][0]
    assert [comment["content"] for comment in feed_item["comments"]] == ["lovely", "again"]


def test_delete_post_requires_author_or_admin(authed_client, user_factory):
    author = user_factory("writer")
    stranger = user_factory("stranger")
    admin = user_factory("moderator", role="ADMIN")

    first = authed_client(author).post("/posts/", json={"content": "draft"}).json()["id"]
    second = authed_client(author).post("/posts/", json={"content": "final"}).json()["id"]

    assert authed_client(stranger).delete(f"/posts/{first}").status_code == 403
    assert authed_client(author).delete(f"/posts/{first}").status_code == 204
    assert authed_client(admin).delete(f"/posts/{second}").status_code == 204
    assert authed_client(admin).delete(f"/posts/{uuid4()}").status_code == 404


def test_directory_filters_by_role_and_search(authed_client, user_factory):
    viewer = user_factory("viewer")
    user_factory("alpha", role="TYPE_2", bio="Loves Mountains")
    user_factory("beta", role="TYPE_3")
    client = authed_client(viewer)

    everyone = client.get("/users/", params={"role": "ALL"}).json()["items"]
    assert {user["username"] for user in everyone} == {"viewer", "alpha", "beta"}
    assert everyone[0]["username"] == "beta"

    tier_two = client.get("/users/", params={"role": "TYPE_2"}).json()["items"]
    assert [user["username"] for user in tier_two] == ["alpha"]

    by_bio = client.get("/users/", params={"search": "mountain"}).json()["items"]
    assert [user["username"] for user in by_bio] == ["alpha"]


def test_profile_stats_and_posts(authed_client, user_factory):
    author = user_factory("celebrity")
    fan = user_factory("admirer")
    critic = user_factory("critic")
    post_id = authed_client(author).post("/posts/", json={"content": "hello"}).json()["id"]
    authed_client(author).post("/posts/", json={"content": "again"})
    authed_client(fan).post(f"/posts/{post_id}/reactions", json={"type": "LIKE"})
    authed_client(critic).post(f"/posts/{post_id}/reactions", json={"type": "DISLIKE"})

    client = authed_client(fan)
    stats = client.get(f"/users/{author.id}/stats").json()
    assert stats["posts_count"] == 2
    assert stats["likes_count"] == 1

    posts = client.get(f"/users/{author.id}/posts").json()["items"]
    assert [post["content"] for post in posts] == ["again", "hello"]

    assert client.get(f"/users/{uuid4()}").status_code == 404
