"""Schemas for the administrator console."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class AdminUserUpdateRequest(BaseModel):
    role: Literal["TYPE_1", "TYPE_2", "TYPE_3", "ADMIN"] | None = None
    frame_style: Literal["NONE", "FIRE", "GOLD", "NEON"] | None = None
    is_shiny: bool | None = None
    is_verified: bool | None = None


class SiteStatsResponse(BaseModel):
    users: int
    posts: int
    messages: int
    group_messages: int
    online_users: int


__all__ = ["AdminUserUpdateRequest", "SiteStatsResponse"]
