"""Administrator console logic: account management and site statistics."""
from __future__ import annotations

import logging
from typing import cast
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import ROLE_ADMIN
from ..models import GroupMessage, Message, Post, User
from ..schemas import SiteStatsResponse

logger = logging.getLogger(__name__)

# Only these columns are reachable through the admin update.
_ADMIN_FIELDS = ("role", "frame_style", "is_shiny", "is_verified")


def list_all_users(db: Session, *, search: str | None = None) -> list[User]:
    stmt = select(User)
    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(User.username).like(pattern),
                func.lower(User.email).like(pattern),
                func.lower(func.coalesce(User.display_name, "")).like(pattern),
            )
        )
    return list(db.scalars(stmt.order_by(User.created_at.desc())))


def _remaining_admins(db: Session, *, excluding: UUID) -> int:
    stmt = select(func.count(User.id)).where(User.role == ROLE_ADMIN, User.id != excluding)
    return int(db.scalar(stmt) or 0)


def update_user(db: Session, *, actor: User, user_id: UUID, payload: dict[str, object]) -> User:
    """Apply role and decorative flag changes to ``user_id``."""

    target = db.get(User, user_id)
    if target is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    changes = {field: payload[field] for field in _ADMIN_FIELDS if payload.get(field) is not None}
    if not changes:
        return target

    new_role = cast(str | None, changes.get("role"))
    if (
        new_role is not None
        and target.role == ROLE_ADMIN
        and new_role != ROLE_ADMIN
        and _remaining_admins(db, excluding=target.id) == 0
    ):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot demote the final administrator")

    for field, value in changes.items():
        setattr(target, field, value)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update user") from exc

    db.refresh(target)
    logger.info("Admin %s updated user %s: %s", actor.id, target.id, sorted(changes))
    return target


def delete_user(db: Session, *, actor: User, user_id: UUID) -> None:
    if actor.id == user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete your own account")

    target = db.get(User, user_id)
    if target is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    try:
        db.delete(target)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete user") from exc
    logger.info("Admin %s deleted user %s", actor.id, user_id)


def load_site_stats(db: Session) -> SiteStatsResponse:
    return SiteStatsResponse(
        users=int(db.scalar(select(func.count(User.id))) or 0),
        posts=int(db.scalar(select(func.count(Post.id))) or 0),
        messages=int(db.scalar(select(func.count(Message.id))) or 0),
        group_messages=int(db.scalar(select(func.count(GroupMessage.id))) or 0),
        online_users=int(db.scalar(select(func.count(User.id)).where(User.is_online.is_(True))) or 0),
    )


__all__ = ["list_all_users", "update_user", "delete_user", "load_site_stats"]
