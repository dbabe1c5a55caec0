"""Typed HTTP client for the SocialHub API.

Every call is a single request. Listing calls never raise: on any failure they
log a warning and return an empty list or ``None``. Mutating calls return an
:class:`ActionResult` (or an :class:`AuthResult` for account operations) so the
caller can show the error inline next to the form that triggered it.
"""
from __future__ import annotations

import base64
import logging
import mimetypes
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union
from uuid import UUID

import httpx

from .session import SessionStore

logger = logging.getLogger(__name__)

API_URL_ENV = "SOCIALHUB_API_URL"
DEFAULT_API_URL = "http://localhost:8000"
MIN_PASSWORD_LENGTH = 6

Identifier = Union[str, UUID]


@dataclass(frozen=True)
class AuthResult:
    success: bool
    user: Optional[dict[str, Any]] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class ActionResult:
    success: bool
    data: Any = None
    error: Optional[str] = None


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or f"HTTP {response.status_code}"
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list):
        # FastAPI validation errors
        messages = [str(item.get("msg")) for item in detail if isinstance(item, dict) and item.get("msg")]
        if messages:
            return "; ".join(messages)
    return f"HTTP {response.status_code}"


def local_preview(data: bytes, content_type: Optional[str] = None) -> str:
    media_type = content_type or "application/octet-stream"
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"


class SocialHubClient:
    """Client-side data access for every SocialHub screen."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        session: Optional[SessionStore] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = (base_url or os.getenv(API_URL_ENV) or DEFAULT_API_URL).rstrip("/")
        self.session = session if session is not None else SessionStore()
        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else httpx.Client(base_url=self.base_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "SocialHubClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # transport helpers

    def _headers(self) -> dict[str, str]:
        token = self.session.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        return self._http.request(method, path, headers=self._headers(), **kwargs)

    def _fetch(self, path: str, *, default: Any, params: Optional[dict[str, Any]] = None) -> Any:
        try:
            response = self._request("GET", path, params=params)
        except httpx.HTTPError as exc:
            logger.warning("GET %s failed: %s", path, exc)
            return default
        if response.is_error:
            logger.warning("GET %s returned %s: %s", path, response.status_code, _error_detail(response))
            return default
        try:
            return response.json()
        except ValueError:
            logger.warning("GET %s returned a non-JSON body", path)
            return default

    def _act(self, method: str, path: str, **kwargs: Any) -> ActionResult:
        try:
            response = self._request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            return ActionResult(False, error="Network error, please try again")
        if response.is_error:
            return ActionResult(False, error=_error_detail(response))
        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return ActionResult(True)
        try:
            data = response.json()
        except ValueError:
            logger.warning("%s %s returned a non-JSON body", method, path)
            return ActionResult(False, error="Malformed response from server")
        return ActionResult(True, data=data)

    # ------------------------------------------------------------------
    # accounts

    @property
    def current_user(self) -> Optional[dict[str, Any]]:
        return self.session.user

    def _auth_call(self, path: str, payload: dict[str, Any]) -> AuthResult:
        result = self._act("POST", path, json=payload)
        if not result.success:
            return AuthResult(False, error=result.error)
        body = result.data or {}
        user = body.get("user")
        token = body.get("access_token")
        if not isinstance(user, dict) or not token:
            return AuthResult(False, error="Malformed response from server")
        self.session.save(user=user, token=token)
        return AuthResult(True, user=user)

    def register(
        self,
        email: str,
        username: str,
        password: str,
        *,
        confirm_password: Optional[str] = None,
        display_name: Optional[str] = None,
        role: str = "TYPE_1",
        avatar_url: Optional[str] = None,
    ) -> AuthResult:
        if not email.strip() or not username.strip() or not password:
            return AuthResult(False, error="Email, username and password are required")
        if confirm_password is not None and password != confirm_password:
            return AuthResult(False, error="Passwords do not match")
        if len(password) < MIN_PASSWORD_LENGTH:
            return AuthResult(False, error=f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        payload: dict[str, Any] = {
            "email": email.strip(),
            "username": username.strip(),
            "password": password,
            "role": role,
        }
        if display_name:
            payload["display_name"] = display_name
        if avatar_url:
            payload["avatar_url"] = avatar_url
        return self._auth_call("/auth/register", payload)

    def login(self, email: str, password: str) -> AuthResult:
        if not email.strip() or not password:
            return AuthResult(False, error="Email and password are required")
        return self._auth_call("/auth/login", {"email": email.strip(), "password": password})

    def logout(self) -> None:
        """Mark the account offline and forget the local session."""

        if self.session.token:
            result = self._act("POST", "/auth/logout")
            if not result.success:
                logger.warning("Logout request failed: %s", result.error)
        self.session.clear()

    def refresh_current_user(self) -> Optional[dict[str, Any]]:
        user = self._fetch("/auth/me", default=None)
        if isinstance(user, dict):
            self.session.save(user=user)
        return user

    def update_profile(
        self,
        *,
        display_name: Optional[str] = None,
        bio: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> AuthResult:
        payload = {
            key: value
            for key, value in (("display_name", display_name), ("bio", bio), ("avatar_url", avatar_url))
            if value is not None
        }
        result = self._act("PATCH", "/auth/me", json=payload)
        if not result.success:
            return AuthResult(False, error=result.error)
        self.session.save(user=result.data)
        return AuthResult(True, user=result.data)

    def change_password(self, current_password: str, new_password: str, confirm_password: str) -> ActionResult:
        if new_password != confirm_password:
            return ActionResult(False, error="Passwords do not match")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            return ActionResult(False, error=f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return self._act(
            "POST",
            "/auth/password",
            json={
                "current_password": current_password,
                "new_password": new_password,
                "confirm_password": confirm_password,
            },
        )

    # ------------------------------------------------------------------
    # users

    def list_users(self, *, role: Optional[str] = None, search: Optional[str] = None) -> list[dict[str, Any]]:
        params = {key: value for key, value in (("role", role), ("search", search)) if value}
        body = self._fetch("/users/", default={}, params=params)
        return list(body.get("items", [])) if isinstance(body, dict) else []

    def get_user(self, user_id: Identifier) -> Optional[dict[str, Any]]:
        return self._fetch(f"/users/{user_id}", default=None)

    def get_user_stats(self, user_id: Identifier) -> Optional[dict[str, Any]]:
        return self._fetch(f"/users/{user_id}/stats", default=None)

    def list_user_posts(self, user_id: Identifier, *, limit: int = 100) -> list[dict[str, Any]]:
        body = self._fetch(f"/users/{user_id}/posts", default={}, params={"limit": limit})
        return list(body.get("items", [])) if isinstance(body, dict) else []

    # ------------------------------------------------------------------
    # posts, likes and comments

    def get_feed(self, *, page: int = 1, limit: int = 10) -> dict[str, Any]:
        empty = {"items": [], "total": 0, "page": page, "limit": limit, "has_more": False}
        body = self._fetch("/posts/", default=empty, params={"page": page, "limit": limit})
        return body if isinstance(body, dict) else empty

    def get_post(self, post_id: Identifier) -> Optional[dict[str, Any]]:
        return self._fetch(f"/posts/{post_id}", default=None)

    def create_post(self, content: str = "", image_url: Optional[str] = None) -> ActionResult:
        text = (content or "").strip()
        image = (image_url or "").strip() or None
        if not text and not image:
            return ActionResult(False, error="Write something or attach an image")
        return self._act("POST", "/posts/", json={"content": text, "image_url": image})

    def delete_post(self, post_id: Identifier) -> ActionResult:
        return self._act("DELETE", f"/posts/{post_id}")

    def toggle_like(self, post_id: Identifier, type_: str = "LIKE") -> ActionResult:
        return self._act("POST", f"/posts/{post_id}/reactions", json={"type": type_})

    def list_comments(self, post_id: Identifier) -> list[dict[str, Any]]:
        body = self._fetch(f"/posts/{post_id}/comments", default={})
        return list(body.get("items", [])) if isinstance(body, dict) else []

    def add_comment(self, post_id: Identifier, content: str) -> ActionResult:
        text = (content or "").strip()
        if not text:
            return ActionResult(False, error="Comment cannot be empty")
        return self._act("POST", f"/posts/{post_id}/comments", json={"content": text})

    # ------------------------------------------------------------------
    # direct messages

    def list_conversations(self) -> list[dict[str, Any]]:
        body = self._fetch("/messages/conversations", default={})
        return list(body.get("items", [])) if isinstance(body, dict) else []

    def get_thread(self, other_id: Identifier) -> list[dict[str, Any]]:
        """Fetch the thread with ``other_id``; the server marks it read."""

        body = self._fetch(f"/messages/{other_id}", default={})
        return list(body.get("messages", [])) if isinstance(body, dict) else []

    def mark_read(self, other_id: Identifier) -> int:
        result = self._act("POST", f"/messages/{other_id}/read")
        if not result.success:
            logger.warning("Mark-read for %s failed: %s", other_id, result.error)
            return 0
        return int((result.data or {}).get("updated", 0))

    def send_message(
        self,
        receiver_id: Identifier,
        content: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> ActionResult:
        text = (content or "").strip() or None
        image = (image_url or "").strip() or None
        if text is None and image is None:
            return ActionResult(False, error="Message cannot be empty")
        return self._act(
            "POST",
            "/messages/",
            json={"receiver_id": str(receiver_id), "content": text, "image_url": image},
        )

    def unread_count(self) -> int:
        body = self._fetch("/messages/unread", default={})
        return int(body.get("unread", 0)) if isinstance(body, dict) else 0

    # ------------------------------------------------------------------
    # group chat

    def list_group_messages(self, *, page: int = 1, limit: int = 50) -> dict[str, Any]:
        empty = {"messages": [], "page": page, "limit": limit, "has_more": False}
        body = self._fetch("/group-chat/messages", default=empty, params={"page": page, "limit": limit})
        return body if isinstance(body, dict) else empty

    def send_group_message(self, content: Optional[str] = None, image_url: Optional[str] = None) -> ActionResult:
        text = (content or "").strip() or None
        image = (image_url or "").strip() or None
        if text is None and image is None:
            return ActionResult(False, error="Message cannot be empty")
        return self._act("POST", "/group-chat/messages", json={"content": text, "image_url": image})

    # ------------------------------------------------------------------
    # admin console

    def admin_list_users(self, *, search: Optional[str] = None) -> list[dict[str, Any]]:
        params = {"search": search} if search else None
        body = self._fetch("/admin/users", default={}, params=params)
        return list(body.get("items", [])) if isinstance(body, dict) else []

    def admin_update_user(self, user_id: Identifier, **changes: Any) -> ActionResult:
        payload = {key: value for key, value in changes.items() if value is not None}
        if not payload:
            return ActionResult(False, error="Nothing to update")
        return self._act("PATCH", f"/admin/users/{user_id}", json=payload)

    def admin_delete_user(self, user_id: Identifier) -> ActionResult:
        return self._act("DELETE", f"/admin/users/{user_id}")

    def admin_delete_post(self, post_id: Identifier) -> ActionResult:
        return self._act("DELETE", f"/admin/posts/{post_id}")

    def site_stats(self) -> Optional[dict[str, Any]]:
        return self._fetch("/admin/stats", default=None)

    # ------------------------------------------------------------------
    # image relay

    def upload_image(
        self,
        source: Union[str, os.PathLike[str], bytes],
        *,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> dict[str, Any]:
        """Upload an image and return ``{"url", "durable"}``.

        When the relay cannot be reached the result is a local ``data:`` preview
        with ``durable`` set to False.
        """

        if isinstance(source, bytes):
            data = source
            name = filename or "upload"
        else:
            path = Path(source)
            data = path.read_bytes()
            name = filename or path.name
        media_type = content_type or mimetypes.guess_type(name)[0] or "application/octet-stream"

        result = self._act("POST", "/uploads/image", files={"file": (name, data, media_type)})
        if result.success and isinstance(result.data, dict) and result.data.get("url"):
            return result.data
        logger.warning("Image upload failed, using local preview: %s", result.error)
        return {"url": local_preview(data, media_type), "durable": False}


__all__ = ["SocialHubClient", "AuthResult", "ActionResult", "local_preview", "API_URL_ENV", "DEFAULT_API_URL"]
