"""Directory (radar) and profile routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..constants import MAX_PAGE_SIZE
from ..database import get_session
from ..models import User
from ..schemas import PostFeedResponse, PostResponse, UserListResponse, UserResponse, UserStatsResponse
from ..services import get_current_user, get_user_or_404, get_user_stats, list_user_posts, list_users

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/", response_model=UserListResponse)
async def list_users_endpoint(
    role: str | None = None,
    search: str | None = None,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> UserListResponse:
    users = list_users(db, role=role, search=search)
    return UserListResponse(items=[UserResponse.model_validate(user) for user in users])


@router.get("/{user_id}", response_model=UserResponse)
async def get_user_endpoint(
    user_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    return UserResponse.model_validate(get_user_or_404(db, user_id))


@router.get("/{user_id}/stats", response_model=UserStatsResponse)
async def user_stats_endpoint(
    user_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> UserStatsResponse:
    return UserStatsResponse(**get_user_stats(db, user_id=user_id))


@router.get("/{user_id}/posts", response_model=PostFeedResponse)
async def user_posts_endpoint(
    user_id: UUID,
    limit: int = Query(MAX_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PostFeedResponse:
    posts = list_user_posts(db, user_id=user_id, limit=limit)
    return PostFeedResponse(
        items=[PostResponse.model_validate(post) for post in posts],
        total=len(posts),
        page=1,
        limit=limit,
        has_more=len(posts) == limit,
    )
