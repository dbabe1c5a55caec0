"""SQLAlchemy ORM model for application accounts."""
from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from socialhub.constants import FRAME_NONE, ROLE_TYPE_1
from socialhub.database import Base
from .base import TimestampMixin, utcnow


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    display_name = Column(String(150), nullable=True)
    avatar_url = Column(String(2048), nullable=True)
    bio = Column(String(500), nullable=True)
    role = Column(String(32), nullable=False, server_default=ROLE_TYPE_1, default=ROLE_TYPE_1)
    frame_style = Column(String(16), nullable=False, server_default=FRAME_NONE, default=FRAME_NONE)
    is_shiny = Column(Boolean, nullable=False, server_default=expression.false(), default=False)
    is_online = Column(Boolean, nullable=False, server_default=expression.false(), default=False)
    is_verified = Column(Boolean, nullable=False, server_default=expression.false(), default=False)
    last_seen = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=True)

    posts = relationship("Post", back_populates="author", cascade="all, delete-orphan")
    likes = relationship("Like", back_populates="user", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="user", cascade="all, delete-orphan")
    sent_messages = relationship(
        "Message",
        foreign_keys="Message.sender_id",
        back_populates="sender",
        cascade="all, delete-orphan",
    )
    received_messages = relationship(
        "Message",
        foreign_keys="Message.receiver_id",
        back_populates="receiver",
        cascade="all, delete-orphan",
    )
    group_messages = relationship("GroupMessage", back_populates="sender", cascade="all, delete-orphan")


__all__ = ["User"]
