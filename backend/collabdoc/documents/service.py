"""Document lifecycle operations.

Every function takes the session it works on and commits its own unit of
work. Soft failures (malformed id, row already gone) are reported through the
return value; only the image purge touches object storage.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Union
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..images.service import purge_image
from ..models import Document, Image
from ..models.base import utcnow
from ..observability.metrics import documents_created_total, documents_deleted_total
from ..storage import ObjectStoragePort
from .validation import parse_document_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentSnapshot:
    """Projection of a document used by the collaboration runtime."""

    id: UUID
    data: Optional[bytes]
    modification_secret: str


def create_document(db: Session, owner_external_id: Optional[str] = None) -> Document:
    """Create an empty document.

    Args:
        db: Database session
        owner_external_id: External identity of the creator, None for anonymous

    Returns:
        Document: The persisted document including its modification secret
    """
    document = Document(owner_external_id=owner_external_id or None)
    db.add(document)
    db.commit()
    db.refresh(document)

    documents_created_total.labels(owned=str(document.owner_external_id is not None).lower()).inc()
    logger.info("Document created", extra={"document_id": str(document.id)})
    return document


def fetch_document(db: Session, document_id: Union[str, UUID, None]) -> Optional[DocumentSnapshot]:
    doc_uuid = parse_document_id(document_id)
    if doc_uuid is None:
        return None

    row = (
        db.query(Document.id, Document.data, Document.modification_secret)
        .filter(Document.id == doc_uuid)
        .first()
    )
    if row is None:
        return None
    return DocumentSnapshot(id=row.id, data=row.data, modification_secret=row.modification_secret)


def document_exists(db: Session, document_id: Union[str, UUID, None]) -> bool:
    doc_uuid = parse_document_id(document_id)
    if doc_uuid is None:
        return False
    return db.query(Document.id).filter(Document.id == doc_uuid).first() is not None


def update_last_accessed_at(db: Session, document_id: Union[str, UUID, None]) -> None:
    """Record that a session opened the document.

    Best effort: a malformed id, a vanished row or a database error never
    propagates to the caller.
    """
    doc_uuid = parse_document_id(document_id)
    if doc_uuid is None:
        return

    try:
        updated = (
            db.query(Document)
            .filter(Document.id == doc_uuid)
            .update({Document.last_accessed_at: utcnow()}, synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(
            "Failed to update last access time",
            extra={"document_id": str(doc_uuid), "error": str(e)},
        )
        return

    if updated == 0:
        logger.debug("Touched document no longer exists", extra={"document_id": str(doc_uuid)})


def update_document_snapshot(
    db: Session,
    document_id: Union[str, UUID, None],
    data: Optional[bytes],
) -> bool:
    """Replace the stored snapshot of a document.

    Returns:
        bool: True if a row was updated
    """
    doc_uuid = parse_document_id(document_id)
    if doc_uuid is None:
        return False

    now = utcnow()
    try:
        updated = (
            db.query(Document)
            .filter(Document.id == doc_uuid)
            .update(
                {
                    Document.data: data,
                    Document.updated_at: now,
                    Document.last_accessed_at: now,
                },
                synchronize_session=False,
            )
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            "Failed to store document snapshot",
            extra={"document_id": str(doc_uuid), "error": str(e)},
        )
        return False

    return updated > 0


async def delete_document(
    db: Session,
    storage: Optional[ObjectStoragePort],
    document_id: Union[str, UUID, None],
    reason: str = "explicit",
) -> bool:
    """Delete a document together with its images and their blobs.

    Images are purged first so that no image row or blob outlives the
    document. A blob that cannot be removed is logged and left behind.

    Args:
        db: Database session
        storage: Object storage holding the image blobs, None if unconfigured
        document_id: Document identifier
        reason: Metric label, ``explicit`` or ``expired``

    Returns:
        bool: True if the document row was removed, False if it was already gone
    """
    doc_uuid = parse_document_id(document_id)
    if doc_uuid is None:
        return False

    image_ids = [row.id for row in db.query(Image.id).filter(Image.document_id == doc_uuid).all()]
    for image_id in image_ids:
        await purge_image(db, storage, image_id)

    deleted = (
        db.query(Document)
        .filter(Document.id == doc_uuid)
        .delete(synchronize_session=False)
    )
    db.commit()

    if deleted == 0:
        return False

    documents_deleted_total.labels(reason=reason).inc()
    logger.info(
        "Document deleted",
        extra={"document_id": str(doc_uuid), "images_purged": len(image_ids), "reason": reason},
    )
    return True


def get_documents_by_owner(db: Session, owner_external_id: Optional[str]) -> List[Document]:
    """List an owner's documents, newest first. Anonymous callers own nothing."""
    if not owner_external_id:
        return []

    return (
        db.query(Document)
        .filter(Document.owner_external_id == owner_external_id)
        .order_by(Document.created_at.desc())
        .all()
    )
