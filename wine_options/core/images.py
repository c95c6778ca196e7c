from __future__ import annotations

import io
import logging

from PIL import Image

from .errors import InputValidationError
from .models import ImageUpload

LOGGER = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 10 * 1024 * 1024
PREVIEW_SIZE = 512

INVALID_TYPE_MESSAGE = "Please select a valid image file"
TOO_LARGE_MESSAGE = "Image file is too large. Please choose a smaller image."


def validate_upload(upload: ImageUpload) -> None:
    """Reject anything that is not an image or is larger than 10 MB."""
    if not upload.mime_type.startswith("image/"):
        raise InputValidationError(INVALID_TYPE_MESSAGE)
    if upload.size > MAX_IMAGE_BYTES:
        raise InputValidationError(TOO_LARGE_MESSAGE)


def build_preview(upload: ImageUpload, size: int = PREVIEW_SIZE) -> bytes:
    """Return JPEG thumbnail bytes for the label preview."""
    if not upload.data:
        return b""

    try:
        with Image.open(io.BytesIO(upload.data)) as img:
            img = img.convert("RGB")
            img.thumbnail((size, size), Image.Resampling.LANCZOS)
            buffer = io.BytesIO()
            img.save(buffer, format="JPEG", quality=90)
    except Exception as exc:
        LOGGER.warning("Failed to build preview for %s: %s", upload.name, exc)
        return upload.data

    return buffer.getvalue()
