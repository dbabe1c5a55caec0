"""Schemas used by direct and group messaging endpoints."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .users import UserResponse


class MessageSendRequest(BaseModel):
    receiver_id: UUID
    content: str | None = Field(default=None, max_length=2000)
    image_url: str | None = Field(default=None, max_length=2048)


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sender_id: UUID
    receiver_id: UUID
    content: str | None = None
    image_url: str | None = None
    is_read: bool = False
    created_at: datetime
    sender: UserResponse | None = None
    receiver: UserResponse | None = None


class MessageThreadResponse(BaseModel):
    other_user_id: UUID
    messages: list[MessageResponse]


class ConversationResponse(BaseModel):
    user: UserResponse
    last_message: MessageResponse | None = None
    unread_count: int = 0


class ConversationListResponse(BaseModel):
    items: list[ConversationResponse]


class MarkReadResponse(BaseModel):
    updated: int


class UnreadCountResponse(BaseModel):
    unread: int


class GroupMessageSendRequest(BaseModel):
    content: str | None = Field(default=None, max_length=2000)
    image_url: str | None = Field(default=None, max_length=2048)


class GroupMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sender_id: UUID
    content: str | None = None
    image_url: str | None = None
    created_at: datetime
    sender: UserResponse | None = None


class GroupMessagePageResponse(BaseModel):
    messages: list[GroupMessageResponse]
    page: int
    limit: int
    has_more: bool


__all__ = [
    "MessageSendRequest",
    "MessageResponse",
    "MessageThreadResponse",
    "ConversationResponse",
    "ConversationListResponse",
    "MarkReadResponse",
    "UnreadCountResponse",
    "GroupMessageSendRequest",
    "GroupMessageResponse",
    "GroupMessagePageResponse",
]
