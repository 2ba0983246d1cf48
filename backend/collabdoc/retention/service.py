"""Garbage collection of abandoned documents.

A document expires once its ``last_accessed_at`` is older than the retention
window. The expired ids are selected once per sweep; each deletion then runs
on its own, so a document touched between selection and deletion may still
be removed. Failures are isolated per document.
"""

import logging
import time
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from ..documents.service import delete_document
from ..models import Document
from ..models.base import utcnow
from ..observability.metrics import retention_sweep_duration_seconds
from ..storage import ObjectStoragePort
from .schemas import SweepStatistics

logger = logging.getLogger(__name__)


def calculate_cutoff(retention_days: int, now: Optional[datetime] = None) -> datetime:
    """Instant before which a document counts as abandoned."""
    return (now or utcnow()) - timedelta(days=retention_days)


def find_expired_document_ids(db: Session, cutoff: datetime) -> List[UUID]:
    rows = (
        db.query(Document.id)
        .filter(Document.last_accessed_at < cutoff)
        .order_by(Document.last_accessed_at)
        .all()
    )
    return [row.id for row in rows]


async def sweep_stale_documents(
    db: Session,
    storage: Optional[ObjectStoragePort],
    retention_days: int,
    now: Optional[datetime] = None,
) -> SweepStatistics:
    """Delete every document not accessed within ``retention_days``.

    Args:
        db: Database session
        storage: Object storage holding the image blobs, None if unconfigured
        retention_days: Retention window in days
        now: Reference instant (defaults to the current UTC time)

    Returns:
        SweepStatistics: Outcome of the sweep

    Note:
        A failure on one document is logged and counted; the sweep continues
        with the next one.
    """
    start_time = utcnow()
    started = time.monotonic()
    cutoff = calculate_cutoff(retention_days, now)

    logger.info("Starting retention sweep", extra={"cutoff": cutoff.isoformat()})

    totals = {
        'documents_scanned': 0,
        'documents_deleted': 0,
        'documents_missing': 0,
        'errors': 0,
    }

    expired_ids = find_expired_document_ids(db, cutoff)
    totals['documents_scanned'] = len(expired_ids)

    for document_id in expired_ids:
        try:
            if await delete_document(db, storage, document_id, reason="expired"):
                totals['documents_deleted'] += 1
            else:
                totals['documents_missing'] += 1
        except Exception as e:
            db.rollback()
            logger.error(
                f"Failed to delete expired document {document_id}",
                exc_info=True,
                extra={"document_id": str(document_id), "error": str(e)}
            )
            totals['errors'] += 1

    duration = time.monotonic() - started
    retention_sweep_duration_seconds.observe(duration)

    statistics = SweepStatistics(
        job_started_at=start_time,
        job_completed_at=utcnow(),
        duration_seconds=duration,
        cutoff=cutoff,
        **totals
    )

    logger.info(
        "Retention sweep completed",
        extra={
            "duration_seconds": duration,
            "documents_deleted": statistics.documents_deleted,
            "errors": statistics.errors,
        }
    )
    return statistics
