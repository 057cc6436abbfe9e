"""Multipart upload helpers."""

import json
from typing import Any

from fastapi import UploadFile

from catalog_service.catalog.service import ImageUpload
from catalog_service.domain.exceptions import ValidationFailure
from catalog_service.infrastructure.config import settings


async def read_image(upload: UploadFile | None, required: bool = True) -> ImageUpload | None:
    """Read an uploaded image, enforcing the size limit.

    At most one byte past the limit is read, so oversize payloads are
    rejected without buffering them.

    Args:
        upload: Uploaded ``image`` part, if any.
        required: Whether a missing image is an error.

    Returns:
        The image, or None when optional and absent.

    Raises:
        ValidationFailure: If the image is missing or too large.
    """
    if upload is None or not upload.filename:
        if required:
            raise ValidationFailure("Image is required", details={"field": "image"})
        return None

    data = await upload.read(settings.max_image_size + 1)
    if len(data) > settings.max_image_size:
        raise ValidationFailure(
            "File size exceeds the limit",
            details={"field": "image", "max_bytes": settings.max_image_size},
        )
    return ImageUpload(data=data, content_type=upload.content_type, filename=upload.filename)


def parse_json_field(value: str | None, field: str) -> Any:
    """Decode a JSON-encoded form field.

    Raises:
        ValidationFailure: If the value is not valid JSON.
    """
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        raise ValidationFailure(
            f"{field} must be valid JSON",
            details={"field": field},
        ) from None
