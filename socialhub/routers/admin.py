"""Administrator console routes. Every route requires the ADMIN role."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..constants import ROLE_ADMIN
from ..database import get_session
from ..models import User
from ..schemas import AdminUserUpdateRequest, SiteStatsResponse, UserListResponse, UserResponse
from ..services import delete_post, delete_user, list_all_users, load_site_stats, require_roles, update_user

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=UserListResponse)
async def admin_users_endpoint(
    search: str | None = None,
    db: Session = Depends(get_session),
    current_user: User = Depends(require_roles(ROLE_ADMIN)),
) -> UserListResponse:
    users = list_all_users(db, search=search)
    return UserListResponse(items=[UserResponse.model_validate(user) for user in users])


@router.patch("/users/{user_id}", response_model=UserResponse)
async def admin_update_user_endpoint(
    user_id: UUID,
    payload: AdminUserUpdateRequest,
    db: Session = Depends(get_session),
    current_user: User = Depends(require_roles(ROLE_ADMIN)),
) -> UserResponse:
    user = update_user(db, actor=current_user, user_id=user_id, payload=payload.model_dump(exclude_unset=True))
    return UserResponse.model_validate(user)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def admin_delete_user_endpoint(
    user_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(require_roles(ROLE_ADMIN)),
) -> None:
    delete_user(db, actor=current_user, user_id=user_id)


@router.get("/stats", response_model=SiteStatsResponse)
async def admin_stats_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(require_roles(ROLE_ADMIN)),
) -> SiteStatsResponse:
    return load_site_stats(db)


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def admin_delete_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(require_roles(ROLE_ADMIN)),
) -> None:
    delete_post(db, post_id=post_id, requester=current_user)
