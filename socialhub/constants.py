"""Project-wide constant values."""
from __future__ import annotations

ROLE_TYPE_1 = "TYPE_1"
ROLE_TYPE_2 = "TYPE_2"
ROLE_TYPE_3 = "TYPE_3"
ROLE_ADMIN = "ADMIN"

# Tiers a visitor may pick at registration; ADMIN is granted, never chosen.
MEMBER_ROLES = (ROLE_TYPE_1, ROLE_TYPE_2, ROLE_TYPE_3)
ALL_ROLES = MEMBER_ROLES + (ROLE_ADMIN,)

FRAME_NONE = "NONE"
FRAME_STYLES = (FRAME_NONE, "FIRE", "GOLD", "NEON")

LIKE = "LIKE"
DISLIKE = "DISLIKE"
LIKE_TYPES = (LIKE, DISLIKE)

FEED_PAGE_SIZE = 10
GROUP_CHAT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100

MIN_PASSWORD_LENGTH = 6

__all__ = [
    "ROLE_TYPE_1",
    "ROLE_TYPE_2",
    "ROLE_TYPE_3",
    "ROLE_ADMIN",
    "MEMBER_ROLES",
    "ALL_ROLES",
    "FRAME_NONE",
    "FRAME_STYLES",
    "LIKE",
    "DISLIKE",
    "LIKE_TYPES",
    "FEED_PAGE_SIZE",
    "GROUP_CHAT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "MIN_PASSWORD_LENGTH",
]
