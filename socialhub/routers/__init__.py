"""Aggregate router exports."""
from .admin import router as admin_router
from .auth import router as auth_router
from .group_chat import router as group_chat_router
from .messages import router as messages_router
from .posts import router as posts_router
from .uploads import router as uploads_router
from .users import router as users_router

__all__ = [
    "admin_router",
    "auth_router",
    "group_chat_router",
    "messages_router",
    "posts_router",
    "uploads_router",
    "users_router",
]
