"""Pydantic schemas for authentication and account settings endpoints."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..constants import MIN_PASSWORD_LENGTH
from .users import UserResponse


class RegisterRequest(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=32)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=128)
    display_name: str | None = Field(default=None, max_length=150)
    role: Literal["TYPE_1", "TYPE_2", "TYPE_3"] = "TYPE_1"
    avatar_url: str | None = Field(default=None, max_length=2048)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class ProfileUpdateRequest(BaseModel):
    """Fields an account may change on itself.

    Anything else in the payload (role, frame_style, is_shiny, is_verified...)
    is dropped on validation.
    """

    model_config = ConfigDict(extra="ignore")

    display_name: str | None = Field(default=None, max_length=150)
    bio: str | None = Field(default=None, max_length=500)
    avatar_url: str | None = Field(default=None, max_length=2048)


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., max_length=128)
    confirm_password: str


__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "AuthResponse",
    "ProfileUpdateRequest",
    "PasswordChangeRequest",
]
