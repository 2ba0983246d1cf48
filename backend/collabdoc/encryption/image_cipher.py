"""Image blob encryption using AES-256-GCM.

Images are encrypted before they reach object storage and decrypted on the
way out, so a leaked bucket does not leak document contents.

Security considerations:
- Uses AES-256-GCM for authenticated encryption
- Derives the encryption key from IMAGE_ENCRYPTION_KEY using HKDF
- Each encryption uses a unique random nonce, stored as the blob prefix
- The image id is bound as associated data, so blobs cannot be swapped
"""

import os
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from ..config import get_settings

NONCE_SIZE = 12
FORMAT_VERSION = 1


class ImageCipher:
    """AES-256-GCM encryption for image payloads.

    Blob layout: ``version (1 byte) | nonce (12 bytes) | ciphertext+tag``.

    Example:
        cipher = ImageCipher()
        blob = cipher.encrypt(png_bytes, context=str(image.id))
        png_bytes = cipher.decrypt(blob, context=str(image.id))
    """

    HKDF_INFO = b"collabdoc-image-encryption-v1"

    def __init__(self, key_material: Optional[str] = None):
        """Initialize cipher.

        Args:
            key_material: Base key material. Defaults to IMAGE_ENCRYPTION_KEY from settings.
        """
        self._key_material = (key_material or get_settings().IMAGE_ENCRYPTION_KEY).encode()
        self._key = self._derive_key()

    def _derive_key(self) -> bytes:
        """Derive 256-bit encryption key using HKDF."""
        hkdf = HKDF(
            algorithm=hashes.SHA256(),
            length=32,
            salt=None,
            info=self.HKDF_INFO,
        )
        return hkdf.derive(self._key_material)

    def encrypt(self, payload: bytes, context: str) -> bytes:
        """Encrypt an image payload bound to ``context`` (the image id)."""
        nonce = os.urandom(NONCE_SIZE)
        ciphertext = AESGCM(self._key).encrypt(nonce, payload, context.encode())
        return bytes([FORMAT_VERSION]) + nonce + ciphertext

    def decrypt(self, blob: bytes, context: str) -> bytes:
        """Decrypt a blob produced by :meth:`encrypt`.

        Raises:
            ValueError: If decryption fails (wrong key, tampered data, wrong context)
        """
        if not blob or blob[0] != FORMAT_VERSION:
            raise ValueError("Unsupported image encryption format")

        nonce = blob[1:1 + NONCE_SIZE]
        ciphertext = blob[1 + NONCE_SIZE:]

        try:
            return AESGCM(self._key).decrypt(nonce, ciphertext, context.encode())
        except InvalidTag as e:
            raise ValueError(f"Decryption failed - invalid key or tampered data: {e!r}")


def get_image_cipher() -> ImageCipher:
    """FastAPI dependency returning a cipher keyed from settings."""
    return ImageCipher()
