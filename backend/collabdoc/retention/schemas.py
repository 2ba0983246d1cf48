"""Pydantic schemas for garbage collection statistics."""

from datetime import datetime

from pydantic import BaseModel, Field


class SweepStatistics(BaseModel):
    """Statistics from one retention sweep.

    Tracks how many expired documents were found, how many were deleted and
    how many failed, for monitoring and alerting on sweep health.
    """

    job_started_at: datetime = Field(
        description="When the sweep started"
    )

    job_completed_at: datetime = Field(
        description="When the sweep completed"
    )

    duration_seconds: float = Field(
        ge=0.0,
        description="Sweep execution duration in seconds"
    )

    cutoff: datetime = Field(
        description="Documents last accessed before this instant were expired"
    )

    documents_scanned: int = Field(
        default=0,
        ge=0,
        description="Number of expired documents selected for deletion"
    )

    documents_deleted: int = Field(
        default=0,
        ge=0,
        description="Number of documents deleted"
    )

    documents_missing: int = Field(
        default=0,
        ge=0,
        description="Number of selected documents already gone at deletion time"
    )

    errors: int = Field(
        default=0,
        ge=0,
        description="Number of documents whose deletion failed"
    )

    @property
    def has_errors(self) -> bool:
        """Whether any deletion failed."""
        return self.errors > 0
