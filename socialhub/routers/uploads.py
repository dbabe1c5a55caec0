"""Image upload relay endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from ..models import User
from ..schemas import ImageUploadResponse
from ..services import get_current_user, upload_image

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post("/image", response_model=ImageUploadResponse)
async def upload_image_endpoint(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
) -> ImageUploadResponse:
    """Send the image to the image host and return its public URL.

    When the host is unavailable the response carries an inline ``data:``
    preview and ``durable`` is false.
    """

    result = await upload_image(file)
    return ImageUploadResponse(url=result.url, durable=result.durable)
