"""Business logic for gallery posts, reactions and comments."""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..constants import DISLIKE, FEED_PAGE_SIZE, LIKE, LIKE_TYPES, MAX_PAGE_SIZE, ROLE_ADMIN
from ..models import Comment, Like, Post, User

logger = logging.getLogger(__name__)


def normalize_page(page: int | None, limit: int | None, *, default_limit: int) -> tuple[int, int]:
    safe_page = max(1, int(page or 1))
    safe_limit = max(1, min(int(limit or default_limit), MAX_PAGE_SIZE))
    return safe_page, safe_limit


def _post_loader_options():
    return (
        selectinload(Post.author),
        selectinload(Post.likes),
        selectinload(Post.comments).selectinload(Comment.user),
    )


def _get_post_or_404(db: Session, post_id: UUID) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


def list_feed(db: Session, *, page: int | None = 1, limit: int | None = FEED_PAGE_SIZE) -> dict[str, Any]:
    """Return one reverse-chronological page of posts with their joins loaded.

    ``has_more`` is true exactly when the page came back full.
    """

    safe_page, safe_limit = normalize_page(page, limit, default_limit=FEED_PAGE_SIZE)
    stmt = (
        select(Post)
        .options(*_post_loader_options())
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset((safe_page - 1) * safe_limit)
        .limit(safe_limit)
    )
    posts = list(db.scalars(stmt))
    total = int(db.scalar(select(func.count(Post.id))) or 0)
    return {
        "items": posts,
        "total": total,
        "page": safe_page,
        "limit": safe_limit,
        "has_more": len(posts) == safe_limit,
    }


def create_post(db: Session, *, author: User, content: str | None, image_url: str | None = None) -> Post:
    """Persist a post carrying text, an image, or both."""

    text = (content or "").strip()
    image = (image_url or "").strip() or None
    if not text and not image:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Post requires text or an image")

    post = Post(author_id=author.id, content=text, image_url=image)
    try:
        db.add(post)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create post for user %s", author.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create post") from exc

    db.refresh(post)
    return post


def get_post(db: Session, *, post_id: UUID) -> Post:
    stmt = select(Post).where(Post.id == post_id).options(*_post_loader_options())
    post = db.scalar(stmt)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


def delete_post(db: Session, *, post_id: UUID, requester: User) -> None:
    """Delete a post when the requester is its author or an administrator."""

    post = _get_post_or_404(db, post_id)
    is_admin = (requester.role or "").upper() == ROLE_ADMIN
    if post.author_id != requester.id and not is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to delete this post")

    try:
        db.delete(post)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete post") from exc
    logger.info("Post %s deleted by %s", post_id, requester.id)


def _reaction_counts(db: Session, post_id: UUID) -> tuple[int, int]:
    rows = db.execute(
        select(Like.type, func.count(Like.id)).where(Like.post_id == post_id).group_by(Like.type)
    ).all()
    counts = {kind: int(total) for kind, total in rows}
    return counts.get(LIKE, 0), counts.get(DISLIKE, 0)


def toggle_like(db: Session, *, post_id: UUID, user_id: UUID, type_: str) -> dict[str, Any]:
    """Toggle a reaction on a post.

    Same polarity as the existing row removes it, the opposite polarity
    replaces it, and no row inserts one.
    """

    kind = (type_ or "").upper()
    if kind not in LIKE_TYPES:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Unknown reaction type")

    _get_post_or_404(db, post_id)
    existing = db.scalar(select(Like).where(Like.post_id == post_id, Like.user_id == user_id))

    result: Like | None
    if existing is None:
        result = Like(post_id=post_id, user_id=user_id, type=kind)
        db.add(result)
    elif existing.type == kind:
        db.delete(existing)
        result = None
    else:
        existing.type = kind
        result = existing

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update reaction") from exc

    if result is not None:
        db.refresh(result)
    like_count, dislike_count = _reaction_counts(db, post_id)
    return {
        "post_id": post_id,
        "like": result,
        "like_count": like_count,
        "dislike_count": dislike_count,
    }


def list_comments(db: Session, *, post_id: UUID) -> list[Comment]:
    _get_post_or_404(db, post_id)
    stmt = (
        select(Comment)
        .where(Comment.post_id == post_id)
        .options(selectinload(Comment.user))
        .order_by(Comment.created_at.asc())
    )
    return list(db.scalars(stmt))


def create_comment(db: Session, *, post_id: UUID, author: User, content: str) -> Comment:
    post = _get_post_or_404(db, post_id)
    text = (content or "").strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Comment cannot be empty")

    comment = Comment(post_id=post.id, user_id=author.id, content=text)
    db.add(comment)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to add comment") from exc

    db.refresh(comment)
    return comment


__all__ = [
    "normalize_page",
    "list_feed",
    "create_post",
    "get_post",
    "delete_post",
    "toggle_like",
    "list_comments",
    "create_comment",
]
