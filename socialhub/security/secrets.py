"""Loading of the two secrets SocialHub depends on.

The JWT signing key is mandatory and read straight from the environment; the
image-host key is optional and comes from settings. Both reject the
placeholder values shipped in ``.env.example`` and common docs.
"""
from __future__ import annotations

import os
from typing import Final

from ..config import Settings

__all__ = ["MissingSecretError", "is_placeholder", "load_jwt_secret", "load_image_host_key"]

JWT_SECRET_ENV: Final[str] = "JWT_SECRET_KEY"


class MissingSecretError(RuntimeError):
    """Raised when a mandatory secret is absent or still a placeholder."""


_PLACEHOLDER_VALUES: Final[frozenset[str]] = frozenset(
    {
        "changeme",
        "change-me",
        "placeholder",
        "secret",
        "your-key-here",
        "replace-with-a-long-random-string",
    }
)


def is_placeholder(value: str | None) -> bool:
    normalized = (value or "").strip().lower()
    return not normalized or normalized in _PLACEHOLDER_VALUES


def load_jwt_secret() -> str:
    value = os.getenv(JWT_SECRET_ENV)
    if is_placeholder(value):
        raise MissingSecretError(f"{JWT_SECRET_ENV} must be set to a real signing key")
    return value.strip()


def load_image_host_key(settings: Settings) -> str | None:
    """Return the image-host API key, or ``None`` when uploads cannot be relayed."""

    value = settings.imgbb_api_key
    if is_placeholder(value):
        return None
    return value.strip()
