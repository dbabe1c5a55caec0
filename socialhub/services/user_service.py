"""Read-side queries behind the radar directory and profile pages."""
from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from ..constants import LIKE, MAX_PAGE_SIZE
from ..models import Comment, Like, Post, User


def _search_filter(search: str | None, *columns):
    if not search or not search.strip():
        return None
    pattern = f"%{search.strip().lower()}%"
    return or_(*(func.lower(func.coalesce(column, "")).like(pattern) for column in columns))


def list_users(db: Session, *, role: str | None = None, search: str | None = None) -> list[User]:
    """Return accounts for the directory, optionally filtered by tier and text."""

    stmt = select(User)
    if role and role.upper() != "ALL":
        stmt = stmt.where(User.role == role.upper())
    text_filter = _search_filter(search, User.username, User.display_name, User.bio)
    if text_filter is not None:
        stmt = stmt.where(text_filter)
    stmt = stmt.order_by(User.created_at.desc())
    return list(db.scalars(stmt))


def get_user_or_404(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def get_user_stats(db: Session, *, user_id: UUID) -> dict[str, int | UUID]:
    """Count the account's posts and the positive likes those posts received."""

    get_user_or_404(db, user_id)
    posts_count = db.scalar(select(func.count(Post.id)).where(Post.author_id == user_id)) or 0
    likes_count = (
        db.scalar(
            select(func.count(Like.id))
            .join(Post, Like.post_id == Post.id)
            .where(Post.author_id == user_id, Like.type == LIKE)
        )
        or 0
    )
    return {"user_id": user_id, "posts_count": int(posts_count), "likes_count": int(likes_count)}


def list_user_posts(db: Session, *, user_id: UUID, limit: int = MAX_PAGE_SIZE) -> list[Post]:
    get_user_or_404(db, user_id)
    safe_limit = max(1, min(int(limit or MAX_PAGE_SIZE), MAX_PAGE_SIZE))
    stmt = (
        select(Post)
        .where(Post.author_id == user_id)
        .options(
            selectinload(Post.author),
            selectinload(Post.likes),
            selectinload(Post.comments).selectinload(Comment.user),
        )
        .order_by(Post.created_at.desc())
        .limit(safe_limit)
    )
    return list(db.scalars(stmt))


__all__ = ["list_users", "get_user_or_404", "get_user_stats", "list_user_posts"]
