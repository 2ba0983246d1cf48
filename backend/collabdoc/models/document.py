"""Document SQLAlchemy model

A document is the persisted side of one collaborative editing session: the
opaque CRDT snapshot plus the capability secret that grants write access.
"""

import uuid

from sqlalchemy import Column, Text, LargeBinary, DateTime, Uuid, Index
from sqlalchemy.orm import relationship

from .base import Base, utcnow


def generate_modification_secret() -> str:
    return str(uuid.uuid4())


class Document(Base):
    """Collaborative document.

    ``id`` and ``modification_secret`` are assigned once at insert time and
    never rewritten. ``last_accessed_at`` is bumped whenever a session loads
    the document and drives the retention sweep.
    """
    __tablename__ = "document"
    __table_args__ = (
        Index("ix_document_owner_external_id", "owner_external_id"),
        Index("ix_document_last_accessed_at", "last_accessed_at"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    modification_secret = Column(Text, nullable=False, default=generate_modification_secret)
    owner_external_id = Column(Text, nullable=True)
    data = Column(LargeBinary, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    last_accessed_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    images = relationship("Image", back_populates="document", passive_deletes=True)
