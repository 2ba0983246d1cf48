"""Celery tasks for garbage collection.

Tasks:
- retention_sweep_task: runs every RETENTION_SWEEP_INTERVAL_SECONDS via Celery Beat
"""

import asyncio
import logging
from typing import Any, Dict

from celery import shared_task

from ..config import get_settings
from ..database import SessionLocal
from ..storage import StorageError, create_storage_adapter
from .service import sweep_stale_documents

logger = logging.getLogger(__name__)


@shared_task(name="retention.sweep_documents", bind=True)
def retention_sweep_task(self) -> Dict[str, Any]:
    """Delete documents that have not been opened within the retention window.

    The task is idempotent: running it twice in succession finds nothing new
    to delete the second time.

    Returns:
        Dict with sweep statistics, or a failed status with the error

    Raises:
        Nothing. Errors are logged and reported in the result.
    """
    settings = get_settings()
    logger.info("Retention sweep task started")

    try:
        storage = create_storage_adapter()
    except (ValueError, StorageError) as e:
        # Rows are still reclaimed; their blobs are left in the bucket
        logger.warning(
            "Object storage unavailable, sweeping without blob cleanup",
            extra={"error": str(e)}
        )
        storage = None

    db = SessionLocal()
    try:
        statistics = asyncio.run(
            sweep_stale_documents(db, storage, settings.DOCUMENT_RETENTION_DAYS)
        )

        result = {
            'status': 'completed',
            'job_started_at': statistics.job_started_at.isoformat(),
            'job_completed_at': statistics.job_completed_at.isoformat(),
            'duration_seconds': statistics.duration_seconds,
            'cutoff': statistics.cutoff.isoformat(),
            'documents_scanned': statistics.documents_scanned,
            'documents_deleted': statistics.documents_deleted,
            'documents_missing': statistics.documents_missing,
            'errors': statistics.errors,
            'has_errors': statistics.has_errors,
        }

        logger.info("Retention sweep task completed", extra=result)
        return result

    except Exception as e:
        logger.error(
            "Retention sweep task failed",
            exc_info=True,
            extra={"error": str(e)}
        )
        return {
            'status': 'failed',
            'error': str(e),
            'documents_deleted': 0,
        }

    finally:
        db.close()
