"""Business logic for registration, login and account settings."""
from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional, Tuple
from urllib.parse import quote
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import FRAME_NONE, MIN_PASSWORD_LENGTH
from ..database import get_session
from ..models import User
from ..schemas import PasswordChangeRequest, ProfileUpdateRequest, RegisterRequest
from ..security.secrets import MissingSecretError, load_jwt_secret

logger = logging.getLogger(__name__)

_security = HTTPBearer(auto_error=False)
_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
DEFAULT_TOKEN_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "1440"))


@lru_cache(maxsize=1)
def _get_jwt_secret() -> str:
    try:
        return load_jwt_secret()
    except MissingSecretError as exc:
        raise RuntimeError(str(exc)) from exc


def hash_password(password: str) -> str:
    """Hash a plain-text password using bcrypt."""

    return _pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify that ``password`` matches ``hashed_password``."""

    try:
        return _pwd_context.verify(password, hashed_password)
    except Exception:  # pragma: no cover - passlib internal errors are rare
        logger.exception("Password verification failed due to an unexpected error")
        return False


def create_access_token(subject: UUID, *, expires_minutes: Optional[int] = None) -> str:
    """Create a signed JWT holding the provided ``subject``."""

    expire_delta = timedelta(minutes=expires_minutes or DEFAULT_TOKEN_MINUTES)
    now = datetime.now(timezone.utc)
    payload = {"sub": str(subject), "exp": now + expire_delta, "iat": now}
    return jwt.encode(payload, _get_jwt_secret(), algorithm=ALGORITHM)


def decode_access_token(token: str) -> UUID:
    """Decode and validate a JWT, returning the embedded subject UUID."""

    try:
        payload = jwt.decode(token, _get_jwt_secret(), algorithms=[ALGORITHM])
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    subject = payload.get("sub")
    if not subject:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    try:
        return UUID(subject)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload") from exc


def default_avatar_url(username: str) -> str:
    base = get_settings().default_avatar_base_url.rstrip("/")
    return f"{base}?seed={quote(username)}"


def register_user(db: Session, payload: RegisterRequest) -> Tuple[User, str]:
    """Persist a new account and return it with an access token."""

    email = str(payload.email).strip().lower()
    username = payload.username.strip()

    existing_email = db.scalar(select(User.id).where(User.email == email))
    if existing_email:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    existing_username = db.scalar(select(User.id).where(User.username == username))
    if existing_username:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already in use")

    display_name = (payload.display_name or "").strip() or username
    avatar_url = (payload.avatar_url or "").strip() or default_avatar_url(username)
    now = datetime.now(timezone.utc)

    user = User(
        email=email,
        username=username,
        hashed_password=hash_password(payload.password),
        display_name=display_name,
        avatar_url=avatar_url,
        bio="",
        role=payload.role,
        frame_style=FRAME_NONE,
        is_shiny=False,
        is_online=True,
        is_verified=False,
        last_seen=now,
    )

    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError as exc:
        # Lost the race between the pre-check reads and the insert.
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email or username already in use") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to register user")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to register user") from exc

    logger.info("Registered account %s (%s)", user.id, user.username)
    token = create_access_token(user.id)
    return user, token


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Return the account matching ``email``/``password`` or ``None``."""

    user = db.scalar(select(User).where(User.email == email.strip().lower()))
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def set_presence(db: Session, user: User, *, online: bool) -> User:
    """Record the online flag and last-seen timestamp for ``user``."""

    user.is_online = online
    user.last_seen = datetime.now(timezone.utc)
    try:
        db.add(user)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Failed to update presence for user %s", user.id)
        return user
    db.refresh(user)
    return user


def login_user(db: Session, email: str, password: str) -> Tuple[User, str]:
    user = authenticate_user(db, email, password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    set_presence(db, user, online=True)
    return user, create_access_token(user.id)


def update_profile(db: Session, *, user: User, payload: ProfileUpdateRequest) -> User:
    """Apply self-service profile edits (display name, bio, avatar)."""

    update_data = payload.model_dump(exclude_unset=True)

    if "display_name" in update_data:
        display_name = (update_data["display_name"] or "").strip()
        # An empty display name falls back to the username.
        user.display_name = display_name or user.username
    if "bio" in update_data:
        user.bio = (update_data["bio"] or "").strip()
    if "avatar_url" in update_data:
        avatar = (update_data["avatar_url"] or "").strip()
        if avatar:
            user.avatar_url = avatar

    try:
        db.add(user)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update profile") from exc

    db.refresh(user)
    return user


def change_password(db: Session, *, user: User, payload: PasswordChangeRequest) -> None:
    if not verify_password(payload.current_password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")
    if payload.new_password != payload.confirm_password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Passwords do not match")
    if len(payload.new_password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
        )

    user.hashed_password = hash_password(payload.new_password)
    try:
        db.add(user)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to change password") from exc


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_security),
    db: Session = Depends(get_session),
) -> User:
    """Resolve the authenticated account from the provided bearer token."""

    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    user_id = decode_access_token(credentials.credentials)

    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return user


def require_roles(*allowed_roles: str):
    normalized = {role.upper() for role in allowed_roles if role}

    async def _resolver(user: User = Depends(get_current_user)) -> User:
        role = (getattr(user, "role", None) or "").upper()
        if normalized and role not in normalized:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user

    return _resolver


__all__ = [
    "register_user",
    "authenticate_user",
    "login_user",
    "set_presence",
    "update_profile",
    "change_password",
    "create_access_token",
    "decode_access_token",
    "default_avatar_url",
    "hash_password",
    "verify_password",
    "get_current_user",
    "require_roles",
]
