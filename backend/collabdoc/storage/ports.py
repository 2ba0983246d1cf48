"""Object Storage Port - interface for S3-compatible blob storage.

Image bytes are stored under the image id. The lifecycle layer only ever
talks to this port, so tests can swap in an in-memory implementation.
"""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ObjectStoragePort(ABC):
    """Port interface for S3-compatible object storage operations.

    Example Usage:
        storage = S3StorageAdapter(...)
        await storage.put_object(str(image.id), payload, "image/png")
        payload = await storage.get_object(str(image.id))
    """

    @abstractmethod
    async def put_object(self, key: str, data: bytes, mime_type: str) -> None:
        """Store ``data`` under ``key``, replacing any previous object.

        Raises:
            StorageError: If upload fails or storage is unavailable
        """
        pass

    @abstractmethod
    async def get_object(self, key: str) -> bytes:
        """Return the bytes stored under ``key``.

        Raises:
            FileNotFoundError: If the object doesn't exist
            StorageError: If retrieval fails
        """
        pass

    @abstractmethod
    async def delete_object(self, key: str) -> bool:
        """Delete the object stored under ``key``.

        Returns:
            bool: True if the object was deleted, False if it didn't exist

        Raises:
            StorageError: If deletion fails
        """
        pass

    @abstractmethod
    async def object_exists(self, key: str) -> bool:
        """Check if an object exists (HEAD request only)."""
        pass
