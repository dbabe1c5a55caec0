"""Relay uploaded images to the hosted image API."""
from __future__ import annotations

import base64
import logging
from dataclasses import dataclass

import httpx
from fastapi import HTTPException, UploadFile, status

from ..config import get_settings
from ..security.secrets import load_image_host_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageUploadResult:
    """Where an uploaded image can be fetched from."""

    url: str
    durable: bool


class ImageHostError(RuntimeError):
    """Raised when the image host rejects or fails an upload."""


def inline_preview(data: bytes, content_type: str | None) -> str:
    """Encode ``data`` as a ``data:`` URL usable as a local preview."""

    media_type = (content_type or "").strip() or "application/octet-stream"
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{media_type};base64,{encoded}"


async def post_to_image_host(
    data: bytes,
    *,
    filename: str,
    content_type: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Upload ``data`` and return the hosted URL or raise :class:`ImageHostError`."""

    settings = get_settings()
    api_key = load_image_host_key(settings)
    if api_key is None:
        raise ImageHostError("IMGBB_API_KEY is not configured")

    files = {"image": (filename, data, content_type)}
    try:
        async with httpx.AsyncClient(timeout=settings.imgbb_timeout, transport=transport) as client:
            response = await client.post(settings.imgbb_upload_url, data={"key": api_key}, files=files)
            response.raise_for_status()
            body = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise ImageHostError(f"Image host request failed: {exc}") from exc

    if not isinstance(body, dict) or not body.get("success"):
        raise ImageHostError("Image host reported failure")
    payload = body.get("data")
    url = payload.get("url") if isinstance(payload, dict) else None
    if not isinstance(url, str) or not url.strip():
        raise ImageHostError("Image host response is missing a URL")
    return url.strip()


async def upload_image(
    file: UploadFile,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ImageUploadResult:
    """Forward ``file`` to the image host, falling back to an inline preview.

    Host failures never propagate; the caller gets a ``data:`` URL with
    ``durable=False`` instead.
    """

    max_bytes = get_settings().max_upload_bytes
    data = await file.read(max_bytes + 1)
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty")

    if len(data) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Uploaded file exceeds {max_bytes} bytes",
        )

    filename = (file.filename or "").strip() or "upload"
    content_type = (file.content_type or "").strip() or "application/octet-stream"

    try:
        url = await post_to_image_host(data, filename=filename, content_type=content_type, transport=transport)
    except ImageHostError as exc:
        logger.warning("Image upload failed, serving inline preview instead: %s", exc)
        return ImageUploadResult(url=inline_preview(data, content_type), durable=False)

    return ImageUploadResult(url=url, durable=True)


__all__ = ["ImageUploadResult", "ImageHostError", "inline_preview", "post_to_image_host", "upload_image"]
