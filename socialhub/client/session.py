"""Persisted session record for the SocialHub client."""
from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

SESSION_PATH_ENV = "SOCIALHUB_SESSION_PATH"
DEFAULT_SESSION_PATH = Path.home() / ".socialhub" / "session.json"


def resolve_session_path(path: str | os.PathLike[str] | None = None) -> Path:
    if path is not None:
        return Path(path)
    override = os.getenv(SESSION_PATH_ENV)
    if override:
        return Path(override).expanduser()
    return DEFAULT_SESSION_PATH


class SessionStore:
    """Holds the signed-in account and its access token.

    The record lives in a single JSON file, ``{"token": ..., "user": {...}}``.
    It is read once on construction, rewritten whenever the account changes
    and removed on logout.
    """

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self.path = resolve_session_path(path)
        self._lock = threading.Lock()
        self._token: Optional[str] = None
        self._user: Optional[dict[str, Any]] = None
        self.load()

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def user(self) -> Optional[dict[str, Any]]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token and self._user)

    def load(self) -> None:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.warning("Could not read session file %s: %s", self.path, exc)
            return

        try:
            payload = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring corrupt session file %s", self.path)
            return
        if not isinstance(payload, dict):
            return

        token = payload.get("token")
        user = payload.get("user")
        if isinstance(token, str) and token and isinstance(user, dict):
            self._token = token
            self._user = user

    def save(self, *, user: dict[str, Any], token: Optional[str] = None) -> None:
        """Write the record; ``token`` defaults to the one already held."""

        with self._lock:
            if token is not None:
                self._token = token
            self._user = dict(user)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps({"token": self._token, "user": self._user}), encoding="utf-8")
            os.replace(tmp_path, self.path)

    def clear(self) -> None:
        with self._lock:
            self._token = None
            self._user = None
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass


__all__ = ["SessionStore", "resolve_session_path", "SESSION_PATH_ENV", "DEFAULT_SESSION_PATH"]
