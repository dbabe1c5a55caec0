"""Direct messaging services: conversations, threads and read receipts."""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..models import Message, User

logger = logging.getLogger(__name__)


def _clean_body(content: str | None, image_url: str | None) -> tuple[str | None, str | None]:
    text = (content or "").strip() or None
    image = (image_url or "").strip() or None
    if text is None and image is None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Message requires text or an image")
    return text, image


def list_conversations(db: Session, *, user: User) -> list[dict[str, Any]]:
    """Group every message touching ``user`` by counterpart.

    Conversations are not stored; they are derived from the raw message rows,
    newest activity first, each with its latest message and unread count.
    """

    user_id = user.id
    stmt = (
        select(Message)
        .where(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
        .order_by(Message.created_at.desc())
    )
    messages = list(db.scalars(stmt))

    grouped: dict[UUID, list[Message]] = {}
    for message in messages:
        other_id = message.receiver_id if message.sender_id == user_id else message.sender_id
        grouped.setdefault(other_id, []).append(message)

    if not grouped:
        return []

    counterparts = {
        account.id: account for account in db.scalars(select(User).where(User.id.in_(list(grouped))))
    }

    conversations: list[dict[str, Any]] = []
    for other_id, thread in grouped.items():
        other = counterparts.get(other_id)
        if other is None:
            continue
        unread = sum(1 for item in thread if item.receiver_id == user_id and not item.is_read)
        conversations.append({"user": other, "last_message": thread[0], "unread_count": unread})
    return conversations


def list_thread(db: Session, *, user: User, other_id: UUID) -> list[Message]:
    """Return the messages exchanged with ``other_id`` oldest first."""

    stmt = (
        select(Message)
        .where(
            or_(
                and_(Message.sender_id == user.id, Message.receiver_id == other_id),
                and_(Message.sender_id == other_id, Message.receiver_id == user.id),
            )
        )
        .options(selectinload(Message.sender), selectinload(Message.receiver))
        .order_by(Message.created_at.asc())
    )
    return list(db.scalars(stmt))


def mark_thread_read(db: Session, *, receiver_id: UUID, sender_id: UUID) -> int:
    """Flag every unread message from ``sender_id`` to ``receiver_id`` as read.

    Only ever sets the flag, so repeating the call is harmless.
    """

    stmt = (
        update(Message)
        .where(
            Message.receiver_id == receiver_id,
            Message.sender_id == sender_id,
            Message.is_read.is_(False),
        )
        .values(is_read=True)
        .execution_options(synchronize_session="fetch")
    )
    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to mark messages read") from exc
    return int(result.rowcount or 0)


def open_thread(db: Session, *, user: User, other_id: UUID) -> list[Message]:
    """Load the thread with ``other_id`` and then mark its inbound side read."""

    messages = list_thread(db, user=user, other_id=other_id)
    mark_thread_read(db, receiver_id=user.id, sender_id=other_id)
    return messages


def send_message(
    db: Session,
    *,
    sender: User,
    receiver_id: UUID,
    content: str | None = None,
    image_url: str | None = None,
) -> Message:
    """Persist a direct message from ``sender`` to ``receiver_id``."""

    text, image = _clean_body(content, image_url)
    if receiver_id == sender.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot message yourself")
    if db.get(User, receiver_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipient not found")

    message = Message(sender_id=sender.id, receiver_id=receiver_id, content=text, image_url=image, is_read=False)
    try:
        db.add(message)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to persist direct message from %s", sender.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to persist message") from exc

    db.refresh(message)
    return message


def count_unread(db: Session, *, user: User) -> int:
    stmt = select(func.count(Message.id)).where(Message.receiver_id == user.id, Message.is_read.is_(False))
    return int(db.scalar(stmt) or 0)


__all__ = [
    "list_conversations",
    "list_thread",
    "mark_thread_read",
    "open_thread",
    "send_message",
    "count_unread",
]
