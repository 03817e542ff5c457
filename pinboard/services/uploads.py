"""
Image uploads stored on the local filesystem.

Files land in ``UPLOAD_DIR`` under a random name that keeps the original
extension and are served back from ``UPLOAD_URL_PREFIX``.
"""
import logging
import time
import uuid
from pathlib import Path

from fastapi import UploadFile

from pinboard.config import settings
from pinboard.core.exceptions import ValidationException

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


async def save_upload(file: UploadFile) -> str:
    """Validate and store an uploaded image; returns its public URL."""
    if not (file.content_type or "").startswith("image/"):
        raise ValidationException("Only image files are allowed")

    extension = Path(file.filename or "").suffix.lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise ValidationException(
            f"Unsupported file type. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    content = await file.read()
    if not content:
        raise ValidationException("No file uploaded")
    if len(content) > settings.MAX_UPLOAD_SIZE_BYTES:
        raise ValidationException(
            "File too large",
            details={"max_bytes": settings.MAX_UPLOAD_SIZE_BYTES}
        )

    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)

    filename = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}{extension}"
    (upload_dir / filename).write_bytes(content)

    logger.info(f"Stored upload {filename} ({len(content)} bytes)")
    return f"{settings.UPLOAD_URL_PREFIX}/{filename}"
