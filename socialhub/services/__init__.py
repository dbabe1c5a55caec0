"""Convenience exports for service layer."""
from .admin_service import delete_user, list_all_users, load_site_stats, update_user
from .auth_service import (
    authenticate_user,
    change_password,
    create_access_token,
    decode_access_token,
    get_current_user,
    login_user,
    register_user,
    require_roles,
    set_presence,
    update_profile,
)
from .group_chat_service import list_group_messages, send_group_message
from .image_service import ImageHostError, ImageUploadResult, upload_image
from .message_service import (
    count_unread,
    list_conversations,
    list_thread,
    mark_thread_read,
    open_thread,
    send_message,
)
from .post_service import create_comment, create_post, delete_post, get_post, list_comments, list_feed, toggle_like
from .user_service import get_user_or_404, get_user_stats, list_user_posts, list_users

__all__ = [
    "delete_user",
    "list_all_users",
    "load_site_stats",
    "update_user",
    "authenticate_user",
    "change_password",
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "login_user",
    "register_user",
    "require_roles",
    "set_presence",
    "update_profile",
    "list_group_messages",
    "send_group_message",
    "ImageHostError",
    "ImageUploadResult",
    "upload_image",
    "count_unread",
    "list_conversations",
    "list_thread",
    "mark_thread_read",
    "open_thread",
    "send_message",
    "create_comment",
    "create_post",
    "delete_post",
    "get_post",
    "list_comments",
    "list_feed",
    "toggle_like",
    "get_user_or_404",
    "get_user_stats",
    "list_user_posts",
    "list_users",
]
