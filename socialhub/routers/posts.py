"""Gallery routes: posts, reactions and comments."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..constants import FEED_PAGE_SIZE, MAX_PAGE_SIZE
from ..database import get_session
from ..models import User
from ..schemas import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    LikeResponse,
    PostCreate,
    PostFeedResponse,
    PostResponse,
    ReactionRequest,
    ReactionResponse,
)
from ..services import (
    create_comment,
    create_post,
    delete_post,
    get_current_user,
    get_post,
    list_comments,
    list_feed,
    toggle_like,
)

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/", response_model=PostFeedResponse)
async def feed_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(FEED_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PostFeedResponse:
    result = list_feed(db, page=page, limit=limit)
    return PostFeedResponse(
        items=[PostResponse.model_validate(post) for post in result["items"]],
        total=result["total"],
        page=result["page"],
        limit=result["limit"],
        has_more=result["has_more"],
    )


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    payload: PostCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PostResponse:
    post = create_post(db, author=current_user, content=payload.content, image_url=payload.image_url)
    return PostResponse.model_validate(get_post(db, post_id=post.id))


@router.get("/{post_id}", response_model=PostResponse)
async def get_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PostResponse:
    return PostResponse.model_validate(get_post(db, post_id=post_id))


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> None:
    delete_post(db, post_id=post_id, requester=current_user)


@router.post("/{post_id}/reactions", response_model=ReactionResponse)
async def toggle_reaction_endpoint(
    post_id: UUID,
    payload: ReactionRequest,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> ReactionResponse:
    result = toggle_like(db, post_id=post_id, user_id=current_user.id, type_=payload.type)
    like = result["like"]
    return ReactionResponse(
        post_id=result["post_id"],
        like=LikeResponse.model_validate(like) if like is not None else None,
        like_count=result["like_count"],
        dislike_count=result["dislike_count"],
    )


@router.get("/{post_id}/comments", response_model=CommentListResponse)
async def list_comments_endpoint(
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> CommentListResponse:
    comments = list_comments(db, post_id=post_id)
    return CommentListResponse(items=[CommentResponse.model_validate(comment) for comment in comments])


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment_endpoint(
    post_id: UUID,
    payload: CommentCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> CommentResponse:
    comment = create_comment(db, post_id=post_id, author=current_user, content=payload.content)
    return CommentResponse.model_validate(comment)
