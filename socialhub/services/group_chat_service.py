"""The single global chat room."""
from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..constants import GROUP_CHAT_PAGE_SIZE
from ..models import GroupMessage, User
from .post_service import normalize_page


def list_group_messages(db: Session, *, page: int | None = 1, limit: int | None = GROUP_CHAT_PAGE_SIZE) -> dict[str, Any]:
    """Return a page counted back from the newest message, oldest first."""

    safe_page, safe_limit = normalize_page(page, limit, default_limit=GROUP_CHAT_PAGE_SIZE)
    stmt = (
        select(GroupMessage)
        .options(selectinload(GroupMessage.sender))
        .order_by(GroupMessage.created_at.desc(), GroupMessage.id.desc())
        .offset((safe_page - 1) * safe_limit)
        .limit(safe_limit)
    )
    rows = list(db.scalars(stmt))
    return {
        "messages": list(reversed(rows)),
        "page": safe_page,
        "limit": safe_limit,
        "has_more": len(rows) == safe_limit,
    }


def send_group_message(
    db: Session,
    *,
    sender: User,
    content: str | None = None,
    image_url: str | None = None,
) -> GroupMessage:
    text = (content or "").strip() or None
    image = (image_url or "").strip() or None
    if text is None and image is None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Message requires text or an image")

    message = GroupMessage(sender_id=sender.id, content=text, image_url=image)
    try:
        db.add(message)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to persist message") from exc

    db.refresh(message)
    return message


__all__ = ["list_group_messages", "send_group_message"]
