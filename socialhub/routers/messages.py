"""Direct messaging routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    ConversationListResponse,
    ConversationResponse,
    MarkReadResponse,
    MessageResponse,
    MessageSendRequest,
    MessageThreadResponse,
    UnreadCountResponse,
    UserResponse,
)
from ..services import (
    count_unread,
    get_current_user,
    get_user_or_404,
    list_conversations,
    mark_thread_read,
    open_thread,
    send_message,
)

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/conversations", response_model=ConversationListResponse)
async def conversations_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> ConversationListResponse:
    items = [
        ConversationResponse(
            user=UserResponse.model_validate(entry["user"]),
            last_message=MessageResponse.model_validate(entry["last_message"]),
            unread_count=entry["unread_count"],
        )
        for entry in list_conversations(db, user=current_user)
    ]
    return ConversationListResponse(items=items)


@router.get("/unread", response_model=UnreadCountResponse)
async def unread_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> UnreadCountResponse:
    return UnreadCountResponse(unread=count_unread(db, user=current_user))


@router.post("/", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message_endpoint(
    payload: MessageSendRequest,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    message = send_message(
        db,
        sender=current_user,
        receiver_id=payload.receiver_id,
        content=payload.content,
        image_url=payload.image_url,
    )
    return MessageResponse.model_validate(message)


@router.get("/{other_id}", response_model=MessageThreadResponse)
async def thread_endpoint(
    other_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> MessageThreadResponse:
    get_user_or_404(db, other_id)
    messages = open_thread(db, user=current_user, other_id=other_id)
    return MessageThreadResponse(
        other_user_id=other_id,
        messages=[MessageResponse.model_validate(message) for message in messages],
    )


@router.post("/{other_id}/read", response_model=MarkReadResponse)
async def mark_read_endpoint(
    other_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> MarkReadResponse:
    updated = mark_thread_read(db, receiver_id=current_user.id, sender_id=other_id)
    return MarkReadResponse(updated=updated)
