"""Global FastAPI dependencies for object storage.

Usage:
    @router.get("/images/{image_id}")
    async def get_image(storage: ObjectStoragePort = Depends(get_storage)):
        ...
"""

import logging
from typing import Optional

from .storage import ObjectStoragePort, S3StorageAdapter, StorageError, create_storage_adapter

logger = logging.getLogger(__name__)


def get_storage() -> ObjectStoragePort:
    """Storage adapter built from the MINIO_* environment variables.

    Raises:
        ValueError: If storage credentials are not configured
    """
    return create_storage_adapter()


def get_optional_storage() -> Optional[S3StorageAdapter]:
    """Storage adapter, or None when storage is not configured.

    Used where storage is best effort: health checks and deletes.
    """
    try:
        return create_storage_adapter()
    except (ValueError, StorageError) as e:
        logger.warning(f"Object storage unavailable: {e}")
        return None
