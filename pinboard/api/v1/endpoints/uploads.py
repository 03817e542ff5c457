"""
Upload endpoints.
"""
from fastapi import APIRouter, Depends, File, UploadFile, status
from pydantic import BaseModel

from pinboard.core.security import get_current_user
from pinboard.services import uploads as upload_service

router = APIRouter(prefix="/uploads", tags=["Uploads"])


class UploadResponse(BaseModel):
    url: str


@router.post(
    "/images",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload image",
)
async def upload_image(
    file: UploadFile = File(...),
    current_user: dict = Depends(get_current_user),
):
    """Store an image and return the URL to use as a pin's image_url."""
    return UploadResponse(url=await upload_service.save_upload(file))
