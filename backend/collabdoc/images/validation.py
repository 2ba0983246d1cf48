"""Validation helpers for image uploads."""

import mimetypes
import os
from typing import Optional, Tuple

# Raster and vector formats the editor can embed
SUPPORTED_IMAGE_TYPES = {
    'image/png',
    'image/jpeg',
    'image/gif',
    'image/webp',
    'image/svg+xml',
    'image/bmp',
    'image/avif',
}

FILE_TOO_LARGE_MESSAGE = "File size exceeds maximum allowed size"


def is_supported_image_type(mimetype: Optional[str]) -> bool:
    """Check if a MIME type can be stored as a document image

    Example:
        >>> is_supported_image_type('image/png')
        True
        >>> is_supported_image_type('application/pdf')
        False
    """
    if not mimetype:
        return False
    return mimetype.split(';')[0].strip().lower() in SUPPORTED_IMAGE_TYPES


def validate_image_size(size_bytes: int, max_size: int) -> Tuple[bool, Optional[str]]:
    """Validate an upload against the configured maximum

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> validate_image_size(1024, 1024)
        (True, None)
        >>> validate_image_size(2048, 1024)
        (False, 'File size exceeds maximum allowed size')
    """
    if size_bytes > max_size:
        return False, FILE_TOO_LARGE_MESSAGE
    return True, None


def anonymized_image_name(original_filename: Optional[str], mimetype: Optional[str]) -> str:
    """Build the stored image name, keeping only the extension

    The original stem may carry personal data, so it is never persisted.

    Example:
        >>> anonymized_image_name('holiday photo.PNG', 'image/png')
        'image.png'
        >>> anonymized_image_name(None, 'image/jpeg')
        'image.jpg'
    """
    extension = ''
    if original_filename:
        extension = os.path.splitext(os.path.basename(original_filename))[1].lower()

    if not extension and mimetype:
        extension = mimetypes.guess_extension(mimetype.split(';')[0].strip().lower()) or ''
        if extension == '.jpe':
            extension = '.jpg'

    return f"image{extension}"
