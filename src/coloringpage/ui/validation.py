"""Validation utilities for Coloring Page Creator uploads."""

import logging
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from coloringpage.core.models import InputImage

from .models import INVALID_IMAGE_MESSAGE, MISSING_UPLOAD_MESSAGE

logger = logging.getLogger(__name__)

# Pillow formats whose registered media type the generation service rejects.
# MPO is a JPEG carrying multi-picture data, common in phone and camera photos.
FORMAT_MIME_OVERRIDES = {"MPO": "image/jpeg"}


class ValidationError(Exception):
    """User-friendly validation error.

    This exception is raised when user input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


def format_file_size(num_bytes: int) -> str:
    """Format a byte count for messages (e.g. ``10MB``, ``512KB``)."""
    if num_bytes >= 1024 * 1024:
        return f"{num_bytes / (1024 * 1024):.0f}MB"
    return f"{num_bytes / 1024:.0f}KB"


def validate_upload_size(num_bytes: int, max_bytes: int) -> None:
    """Reject uploads larger than ``max_bytes``.

    Raises:
        ValidationError: If the upload is too large
    """
    if num_bytes > max_bytes:
        raise ValidationError(
            f"Image is too large ({format_file_size(num_bytes)}). "
            f"Maximum is {format_file_size(max_bytes)}."
        )


def sniff_image_mime_type(data: bytes) -> str:
    """Determine the media type of an image from its content.

    Args:
        data: Raw file bytes

    Returns:
        Media type reported by Pillow (e.g. ``image/png``)

    Raises:
        ValidationError: If the bytes are not a readable image
    """
    try:
        with Image.open(BytesIO(data)) as image:
            image_format = image.format
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.warning(f"Upload is not a readable image: {e}")
        raise ValidationError(INVALID_IMAGE_MESSAGE) from e

    image_format = image_format or ""
    mime_type = FORMAT_MIME_OVERRIDES.get(image_format) or Image.MIME.get(image_format)
    if not mime_type or not mime_type.startswith("image/"):
        raise ValidationError(INVALID_IMAGE_MESSAGE)
    return mime_type


def load_upload(path: str | None, max_bytes: int) -> InputImage:
    """Read and validate an uploaded image file.

    Args:
        path: File path provided by the upload component (None if empty)
        max_bytes: Maximum accepted file size

    Returns:
        InputImage with the file bytes and sniffed media type

    Raises:
        ValidationError: If nothing was uploaded, the file is missing,
            too large, or not an image
    """
    if not path:
        raise ValidationError(MISSING_UPLOAD_MESSAGE)

    file_path = Path(path)
    if not file_path.is_file():
        raise ValidationError(f"File not found: {file_path.name}")

    validate_upload_size(file_path.stat().st_size, max_bytes)

    data = file_path.read_bytes()
    if not data:
        raise ValidationError(INVALID_IMAGE_MESSAGE)

    return InputImage(data=data, mime_type=sniff_image_mime_type(data))


def validate_image_payload(b64: str, mime_type: str, max_bytes: int) -> InputImage:
    """Validate a base64 upload as sent by an API client.

    The declared media type must be ``image/*``; the content itself is not
    decoded beyond base64 (the generation service is the judge of that).

    Args:
        b64: Base64-encoded image bytes
        mime_type: Declared media type
        max_bytes: Maximum accepted decoded size

    Returns:
        InputImage built from the payload

    Raises:
        ValidationError: If the media type is not an image type, the payload
            is not valid base64 or is empty, or it exceeds ``max_bytes``
    """
    if not mime_type or not mime_type.startswith("image/"):
        raise ValidationError(INVALID_IMAGE_MESSAGE)

    try:
        image = InputImage.from_base64(b64, mime_type)
    except ValueError as e:
        raise ValidationError(f"Invalid image data: {e}") from e

    validate_upload_size(len(image.data), max_bytes)
    return image
