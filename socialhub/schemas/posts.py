"""Pydantic schemas for gallery posts, likes and comments."""
from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .users import UserResponse


class PostCreate(BaseModel):
    """Payload for a new post. Text, image or both; validated in the service."""

    content: str | None = Field(default=None, max_length=5000)
    image_url: str | None = Field(default=None, max_length=2048)


class LikeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID
    user_id: UUID
    type: str
    created_at: datetime


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID
    user_id: UUID
    content: str
    created_at: datetime
    user: UserResponse | None = None


class CommentListResponse(BaseModel):
    items: list[CommentResponse]


class PostResponse(BaseModel):
    """Serialized post with its author and engagement rows joined."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    author_id: UUID
    content: str
    image_url: str | None = None
    created_at: datetime
    updated_at: datetime
    author: UserResponse | None = None
    likes: list[LikeResponse] = Field(default_factory=list)
    comments: list[CommentResponse] = Field(default_factory=list)


class PostFeedResponse(BaseModel):
    """One page of the gallery feed."""

    items: list[PostResponse]
    total: int
    page: int
    limit: int
    has_more: bool


class ReactionRequest(BaseModel):
    type: Literal["LIKE", "DISLIKE"]


class ReactionResponse(BaseModel):
    post_id: UUID
    like: LikeResponse | None = None
    like_count: int
    dislike_count: int


__all__ = [
    "PostCreate",
    "PostResponse",
    "PostFeedResponse",
    "LikeResponse",
    "ReactionRequest",
    "ReactionResponse",
    "CommentCreate",
    "CommentResponse",
    "CommentListResponse",
]
