"""Image endpoints

Images are uploaded against a document with its modification secret, stored
encrypted in object storage and served back decrypted to anyone who knows
the image id.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..auth.dependencies import require_document_permission, require_image_permission
from ..config import get_settings
from ..database import get_db
from ..dependencies import get_storage
from ..encryption import ImageCipher, get_image_cipher
from ..images.service import create_image, delete_image, get_image, purge_image
from ..images.validation import is_supported_image_type, validate_image_size
from ..models import Document, Image
from ..observability.metrics import (
    image_uploads_rejected_total,
    images_uploaded_total,
    storage_errors_total,
)
from ..storage import ObjectStoragePort, StorageError
from .schemas import ImageUploadResponse, PayloadTooLargeResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Images"])

ENCRYPTED_BLOB_MIME_TYPE = "application/octet-stream"


@router.post(
    "/documents/{document_id}/images",
    response_model=ImageUploadResponse,
    responses={413: {"model": PayloadTooLargeResponse}},
)
async def upload_image(
    file: Annotated[UploadFile, File(...)],
    document: Annotated[Document, Depends(require_document_permission)],
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[ObjectStoragePort, Depends(get_storage)],
    cipher: Annotated[ImageCipher, Depends(get_image_cipher)],
):
    """Attach an image to a document

    Validation:
    - Modification secret (403) and document existence (404)
    - File size against UPLOAD_IMAGE_MAX_SIZE_BYTES (413)
    - Image MIME type (415)

    The image row is written first so the blob can be keyed by its id. If the
    blob cannot be stored the row is removed again and the upload fails with 500.

    Example:
        curl -X POST http://localhost:8000/documents/$ID/images \\
             -H "Authorization: $SECRET" \\
             -F "file=@diagram.png"
    """
    max_size = get_settings().UPLOAD_IMAGE_MAX_SIZE_BYTES
    content = await file.read()

    is_valid, error_msg = validate_image_size(len(content), max_size)
    if not is_valid:
        image_uploads_rejected_total.labels(reason="too_large").inc()
        logger.info(
            "Image upload too large",
            extra={"document_id": str(document.id), "size_bytes": len(content)},
        )
        return JSONResponse(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            content={"error": error_msg, "max_size_bytes": max_size},
        )

    if not is_supported_image_type(file.content_type):
        image_uploads_rejected_total.labels(reason="unsupported_type").inc()
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported image type: {file.content_type}",
        )

    image = create_image(db, document.id, file.content_type, file.filename)

    try:
        blob = cipher.encrypt(content, context=image.storage_key)
        await storage.put_object(image.storage_key, blob, ENCRYPTED_BLOB_MIME_TYPE)
    except StorageError as e:
        storage_errors_total.labels(operation="put").inc()
        image_uploads_rejected_total.labels(reason="storage_error").inc()
        logger.error(
            f"Storage error during image upload: {e}",
            extra={"image_id": image.storage_key, "document_id": str(document.id)},
        )
        delete_image(db, image.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to store image",
        )

    images_uploaded_total.inc()
    return ImageUploadResponse(image_url=f"images/{image.id}")


@router.get("/images/{image_id}", response_class=Response)
async def download_image(
    image_id: str,
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[ObjectStoragePort, Depends(get_storage)],
    cipher: Annotated[ImageCipher, Depends(get_image_cipher)],
):
    """Serve an image inline with its original MIME type

    Raises:
        HTTPException 404: If the image row or its blob is missing or unreadable
    """
    image = get_image(db, image_id)
    if image is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Image not found",
        )

    try:
        blob = await storage.get_object(image.storage_key)
        content = cipher.decrypt(blob, context=image.storage_key)
    except FileNotFoundError:
        logger.error("Image blob missing from storage", extra={"image_id": image.storage_key})
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Image not found",
        )
    except StorageError as e:
        storage_errors_total.labels(operation="get").inc()
        logger.error(f"Storage error during image download: {e}", extra={"image_id": image.storage_key})
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Image not found",
        )
    except ValueError as e:
        logger.error(f"Image blob could not be decrypted: {e}", extra={"image_id": image.storage_key})
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Image not found",
        )

    return Response(
        content=content,
        media_type=image.mimetype,
        headers={"Content-Disposition": f"inline; filename={image.name}"},
    )


@router.delete("/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def remove_image(
    image: Annotated[Image, Depends(require_image_permission)],
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[ObjectStoragePort, Depends(get_storage)],
):
    """Delete an image and its blob using the document's modification secret

    Raises:
        HTTPException 403: If the modification secret is wrong
        HTTPException 404: If the image does not exist
    """
    if await purge_image(db, storage, image.id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Image not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
