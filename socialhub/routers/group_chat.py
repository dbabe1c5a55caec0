"""Routes for the global chat room."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..constants import GROUP_CHAT_PAGE_SIZE, MAX_PAGE_SIZE
from ..database import get_session
from ..models import User
from ..schemas import GroupMessagePageResponse, GroupMessageResponse, GroupMessageSendRequest
from ..services import get_current_user, list_group_messages, send_group_message

router = APIRouter(prefix="/group-chat", tags=["group-chat"])


@router.get("/messages", response_model=GroupMessagePageResponse)
async def list_group_messages_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(GROUP_CHAT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> GroupMessagePageResponse:
    result = list_group_messages(db, page=page, limit=limit)
    return GroupMessagePageResponse(
        messages=[GroupMessageResponse.model_validate(message) for message in result["messages"]],
        page=result["page"],
        limit=result["limit"],
        has_more=result["has_more"],
    )


@router.post("/messages", response_model=GroupMessageResponse, status_code=status.HTTP_201_CREATED)
async def send_group_message_endpoint(
    payload: GroupMessageSendRequest,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> GroupMessageResponse:
    message = send_group_message(db, sender=current_user, content=payload.content, image_url=payload.image_url)
    return GroupMessageResponse.model_validate(message)
