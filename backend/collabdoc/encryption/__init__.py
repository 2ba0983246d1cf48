"""Encryption utilities for image blobs."""

from .image_cipher import ImageCipher, get_image_cipher

__all__ = [
    "ImageCipher",
    "get_image_cipher",
]
