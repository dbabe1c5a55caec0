"""Schemas for the image relay."""
from __future__ import annotations

from pydantic import BaseModel


class ImageUploadResponse(BaseModel):
    """Public URL for an uploaded image.

    ``durable`` is False when the image host was unreachable and ``url`` is an
    inline ``data:`` preview instead of a hosted address.
    """

    url: str
    durable: bool


__all__ = ["ImageUploadResponse"]
