"""Convenience exports for ORM models."""
from .message import GroupMessage, Message
from .post import Comment, Like, Post
from .user import User

__all__ = [
    "Comment",
    "GroupMessage",
    "Like",
    "Message",
    "Post",
    "User",
]
