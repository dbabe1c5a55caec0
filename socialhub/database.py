"""Engine and session plumbing for the SocialHub table store.

Production points ``DATABASE_URL`` at Postgres; tests and local runs use a
SQLite file, which needs foreign keys switched on per connection so the
``ON DELETE CASCADE`` clauses behave the same way.
"""
from __future__ import annotations

from typing import Any, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import get_settings

settings = get_settings()


def _engine_options(url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"pool_pre_ping": True, "future": True}
    if make_url(url).get_backend_name() == "sqlite":
        # Request handlers run in a worker thread pool.
        options["connect_args"] = {"check_same_thread": False}
    return options


engine: Engine = create_engine(settings.database_url, **_engine_options(settings.database_url))

if engine.dialect.name == "sqlite":

    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    future=True,
    expire_on_commit=False,
)

Base = declarative_base()


def get_session() -> Generator[Session, None, None]:
    """Yield one session per request and always close it."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def init_db() -> None:
    """Create any missing tables for the registered models."""
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


__all__ = ["Base", "SessionLocal", "engine", "get_session", "init_db"]
