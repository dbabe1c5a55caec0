"""Convenience exports for schema layer."""
from .admin import AdminUserUpdateRequest, SiteStatsResponse
from .auth import AuthResponse, LoginRequest, PasswordChangeRequest, ProfileUpdateRequest, RegisterRequest
from .media import ImageUploadResponse
from .messages import (
    ConversationListResponse,
    ConversationResponse,
    GroupMessagePageResponse,
    GroupMessageResponse,
    GroupMessageSendRequest,
    MarkReadResponse,
    MessageResponse,
    MessageSendRequest,
    MessageThreadResponse,
    UnreadCountResponse,
)
from .posts import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    LikeResponse,
    PostCreate,
    PostFeedResponse,
    PostResponse,
    ReactionRequest,
    ReactionResponse,
)
from .users import UserListResponse, UserResponse, UserStatsResponse

__all__ = [
    "AdminUserUpdateRequest",
    "SiteStatsResponse",
    "AuthResponse",
    "LoginRequest",
    "PasswordChangeRequest",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "ImageUploadResponse",
    "ConversationListResponse",
    "ConversationResponse",
    "GroupMessagePageResponse",
    "GroupMessageResponse",
    "GroupMessageSendRequest",
    "MarkReadResponse",
    "MessageResponse",
    "MessageSendRequest",
    "MessageThreadResponse",
    "UnreadCountResponse",
    "CommentCreate",
    "CommentListResponse",
    "CommentResponse",
    "LikeResponse",
    "PostCreate",
    "PostFeedResponse",
    "PostResponse",
    "ReactionRequest",
    "ReactionResponse",
    "UserListResponse",
    "UserResponse",
    "UserStatsResponse",
]
