"""Unit tests for the retention sweep.

Tests the expiry threshold, per-document failure isolation, statistics and
the Celery task wrapper.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest

from collabdoc.models import Document, Image
from collabdoc.models.base import utcnow
from collabdoc.retention.schemas import SweepStatistics
from collabdoc.retention.service import calculate_cutoff, sweep_stale_documents
from collabdoc.retention.tasks import retention_sweep_task

RETENTION_DAYS = 30


def _document(db_session, last_accessed_at):
    doc = Document(last_accessed_at=last_accessed_at)
    db_session.add(doc)
    db_session.commit()
    return doc.id


def _exists(db_session, document_id):
    return db_session.query(Document).filter(Document.id == document_id).first() is not None


class TestCalculateCutoff:
    """Test calculate_cutoff"""

    def test_cutoff(self):
        now = utcnow()
        assert calculate_cutoff(RETENTION_DAYS, now) == now - timedelta(days=30)


class TestSweepStaleDocuments:
    """Test sweep_stale_documents"""

    @pytest.mark.asyncio
    async def test_threshold_boundaries(self, db_session, storage):
        now = utcnow()
        threshold = timedelta(days=RETENTION_DAYS)
        expired = _document(db_session, now - threshold - timedelta(seconds=1))
        fresh = _document(db_session, now - threshold + timedelta(seconds=1))

        stats = await sweep_stale_documents(db_session, storage, RETENTION_DAYS, now=now)

        assert not _exists(db_session, expired)
        assert _exists(db_session, fresh)
        assert stats.documents_scanned == 1
        assert stats.documents_deleted == 1
        assert stats.errors == 0

    @pytest.mark.asyncio
    async def test_expired_document_images_purged(self, db_session, storage, document_with_images):
        document, images = document_with_images
        document.last_accessed_at = utcnow() - timedelta(days=RETENTION_DAYS + 1)
        db_session.commit()

        stats = await sweep_stale_documents(db_session, storage, RETENTION_DAYS)

        assert stats.documents_deleted == 1
        assert db_session.query(Image).count() == 0
        assert storage.objects == {}

    @pytest.mark.asyncio
    async def test_nothing_to_sweep(self, db_session, storage, document):
        stats = await sweep_stale_documents(db_session, storage, RETENTION_DAYS)

        assert isinstance(stats, SweepStatistics)
        assert stats.documents_scanned == 0
        assert stats.documents_deleted == 0
        assert stats.has_errors is False
        assert _exists(db_session, document.id)

    @pytest.mark.asyncio
    async def test_failure_on_one_document_does_not_stop_sweep(self, db_session, storage):
        old = utcnow() - timedelta(days=RETENTION_DAYS + 1)
        first = _document(db_session, old)
        second = _document(db_session, old)

        from collabdoc.documents import service as document_service
        real_delete = document_service.delete_document

        async def flaky_delete(db, storage, document_id, reason="explicit"):
            if document_id == first:
                raise RuntimeError("connection reset")
            return await real_delete(db, storage, document_id, reason=reason)

        with patch("collabdoc.retention.service.delete_document", side_effect=flaky_delete):
            stats = await sweep_stale_documents(db_session, storage, RETENTION_DAYS)

        assert stats.errors == 1
        assert stats.documents_deleted == 1
        assert stats.has_errors is True
        assert _exists(db_session, first)
        assert not _exists(db_session, second)

    @pytest.mark.asyncio
    async def test_vanished_document_counted_as_missing(self, db_session, storage):
        _document(db_session, utcnow() - timedelta(days=RETENTION_DAYS + 1))

        async def already_gone(db, storage, document_id, reason="explicit"):
            return False

        with patch("collabdoc.retention.service.delete_document", side_effect=already_gone):
            stats = await sweep_stale_documents(db_session, storage, RETENTION_DAYS)

        assert stats.documents_missing == 1
        assert stats.documents_deleted == 0


class TestRetentionSweepTask:
    """Test the Celery task wrapper"""

    def test_task_returns_statistics(self, db_session, storage):
        expired = _document(db_session, utcnow() - timedelta(days=400))

        with patch("collabdoc.retention.tasks.SessionLocal", return_value=db_session), \
                patch("collabdoc.retention.tasks.create_storage_adapter", return_value=storage):
            result = retention_sweep_task.run()

        assert result['status'] == 'completed'
        assert result['documents_deleted'] == 1
        assert not _exists(db_session, expired)

    def test_task_sweeps_without_storage(self, db_session, document_with_images):
        document, _ = document_with_images
        document.last_accessed_at = utcnow() - timedelta(days=400)
        db_session.commit()

        with patch("collabdoc.retention.tasks.SessionLocal", return_value=db_session), \
                patch("collabdoc.retention.tasks.create_storage_adapter",
                      side_effect=ValueError("Missing required storage credentials")):
            result = retention_sweep_task.run()

        assert result['status'] == 'completed'
        assert result['documents_deleted'] == 1
        assert db_session.query(Document).count() == 0
        assert db_session.query(Image).count() == 0

    def test_task_never_raises(self, db_session, storage):
        with patch("collabdoc.retention.tasks.SessionLocal", return_value=db_session), \
                patch("collabdoc.retention.tasks.create_storage_adapter", return_value=storage), \
                patch("collabdoc.retention.tasks.sweep_stale_documents",
                      side_effect=RuntimeError("database unavailable")):
            result = retention_sweep_task.run()

        assert result['status'] == 'failed'
        assert result['error'] == "database unavailable"
        assert result['documents_deleted'] == 0
