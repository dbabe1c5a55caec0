"""Tests for the administrator bootstrap command."""
from __future__ import annotations

import os
from typing import Iterator

import pytest
from sqlalchemy import delete, select

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_socialhub.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from socialhub.database import Base, SessionLocal, engine  # noqa: E402
from socialhub.models import User  # noqa: E402
from tools import promote_admin  # noqa: E402


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _seed_users() -> Iterator[None]:
    with SessionLocal() as session:
        session.execute(delete(User))
        session.add(User(email="hera@example.com", username="hera", hashed_password="x"))
        session.add(User(email="zeus@example.com", username="zeus", hashed_password="x"))
        session.commit()
    yield


def _role(username: str) -> str:
    with SessionLocal() as session:
        return session.scalar(select(User.role).where(User.username == username))


def test_promote_by_username_or_email(capsys):
    assert promote_admin.main(["promote", "HERA"]) == 0
    assert _role("hera") == "ADMIN"

    assert promote_admin.main(["promote", "zeus@example.com"]) == 0
    assert _role("zeus") == "ADMIN"

    assert promote_admin.main(["list"]) == 0
    out = capsys.readouterr().out
    assert "hera" in out and "zeus" in out


def test_demote_keeps_one_admin():
    promote_admin.main(["promote", "hera"])
    assert promote_admin.main(["demote", "hera"]) == 2
    assert _role("hera") == "ADMIN"

    promote_admin.main(["promote", "zeus"])
    assert promote_admin.main(["demote", "hera", "--role", "TYPE_3"]) == 0
    assert _role("hera") == "TYPE_3"


def test_unknown_account_exits():
    with pytest.raises(SystemExit):
        promote_admin.main(["promote", "nobody"])
