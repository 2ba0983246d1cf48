"""Image SQLAlchemy model

Metadata for an image embedded in a document. The bytes live in object
storage under the image id; this row only records what they are.
"""

import uuid

from sqlalchemy import Column, Text, ForeignKey, DateTime, Uuid, Index
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class Image(Base):
    """Image attached to a document.

    The image never outlives its document: document deletion purges every
    image row and blob before the document row goes.
    """
    __tablename__ = "image"
    __table_args__ = (
        Index("ix_image_document_id", "document_id"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    document_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("document.id", ondelete="CASCADE"),
        nullable=False,
    )
    name = Column(Text, nullable=False)
    mimetype = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    document = relationship("Document", back_populates="images")

    @property
    def storage_key(self) -> str:
        """Object storage key holding the encrypted bytes"""
        return str(self.id)
