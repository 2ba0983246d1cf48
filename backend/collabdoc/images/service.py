"""Image lifecycle operations.

Image rows hold metadata only; the encrypted bytes live in object storage
under ``Image.storage_key``. Removing a blob is best effort, removing the row
is not.
"""

import logging
from typing import Optional, Union
from uuid import UUID

from sqlalchemy.orm import Session

from ..documents.validation import parse_document_id
from ..models import Image
from ..observability.metrics import storage_errors_total
from ..storage import ObjectStoragePort, StorageError
from .validation import anonymized_image_name

logger = logging.getLogger(__name__)


def create_image(
    db: Session,
    document_id: UUID,
    mimetype: str,
    original_filename: Optional[str] = None,
) -> Image:
    """Persist metadata for a new image of ``document_id``.

    The caller must have checked that the document exists and then uploads
    the bytes under ``image.storage_key``.
    """
    image = Image(
        document_id=document_id,
        name=anonymized_image_name(original_filename, mimetype),
        mimetype=mimetype,
    )
    db.add(image)
    db.commit()
    db.refresh(image)

    logger.info(
        "Image created",
        extra={"image_id": str(image.id), "document_id": str(document_id)},
    )
    return image


def get_image(db: Session, image_id: Union[str, UUID, None]) -> Optional[Image]:
    image_uuid = parse_document_id(image_id)
    if image_uuid is None:
        return None
    return db.query(Image).filter(Image.id == image_uuid).first()


def delete_image(db: Session, image_id: Union[str, UUID, None]) -> Optional[Image]:
    """Remove an image row.

    Returns:
        The removed image, or None if there was nothing to remove
    """
    image = get_image(db, image_id)
    if image is None:
        return None

    db.delete(image)
    db.commit()
    return image


async def purge_image(
    db: Session,
    storage: Optional[ObjectStoragePort],
    image_id: Union[str, UUID, None],
) -> Optional[Image]:
    """Remove an image row and then its blob.

    Storage failures are logged and counted; the row stays deleted. With no
    storage configured the blob is left behind and counted the same way.
    """
    image = delete_image(db, image_id)
    if image is None:
        return None

    if storage is None:
        storage_errors_total.labels(operation="delete").inc()
        logger.warning(
            "Object storage not configured, image blob left behind",
            extra={"image_id": image.storage_key},
        )
        return image

    try:
        await storage.delete_object(image.storage_key)
    except StorageError as e:
        storage_errors_total.labels(operation="delete").inc()
        logger.warning(
            "Failed to delete image blob",
            extra={"image_id": image.storage_key, "error": str(e)},
        )

    return image
