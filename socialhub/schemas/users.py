"""Schemas describing accounts as returned to clients."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    """Serialized account row. The password hash never leaves the service."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    username: str
    display_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    role: str
    frame_style: str
    is_shiny: bool = False
    is_online: bool = False
    is_verified: bool = False
    last_seen: datetime | None = None
    created_at: datetime
    updated_at: datetime


class UserListResponse(BaseModel):
    items: list[UserResponse]


class UserStatsResponse(BaseModel):
    user_id: UUID
    posts_count: int
    likes_count: int


__all__ = ["UserResponse", "UserListResponse", "UserStatsResponse"]
