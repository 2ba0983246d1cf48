"""Modification secret verification.

Possession of a document's modification secret is the only write credential
in the system. Verification never raises: an unknown document, a malformed
id, an empty secret and a wrong secret all simply fail.
"""

import hmac
import logging
from typing import Optional, Union
from uuid import UUID

from sqlalchemy.orm import Session

from ..documents.validation import parse_document_id
from ..models import Document

logger = logging.getLogger(__name__)


def load_modification_secret(db: Session, document_id: UUID) -> Optional[str]:
    """Load only the stored secret of a document (None if it does not exist)."""
    row = (
        db.query(Document.id, Document.modification_secret)
        .filter(Document.id == document_id)
        .first()
    )
    return row.modification_secret if row else None


def secrets_match(stored: Optional[str], supplied: Optional[str]) -> bool:
    if not stored or not supplied:
        return False
    return hmac.compare_digest(stored.encode(), supplied.encode())


def verify_modification_secret(
    db: Session,
    document_id: Union[str, UUID, None],
    supplied_secret: Optional[str],
) -> bool:
    """Check a caller-supplied secret against the document's stored secret.

    Args:
        db: Database session
        document_id: Document identifier (string or UUID)
        supplied_secret: Secret presented by the caller

    Returns:
        bool: True only if the document exists and the secrets match
    """
    if not supplied_secret:
        return False

    doc_uuid = parse_document_id(document_id)
    if doc_uuid is None:
        return False

    stored = load_modification_secret(db, doc_uuid)
    if stored is None:
        logger.debug("Secret check for unknown document", extra={"document_id": str(doc_uuid)})
        return False

    return secrets_match(stored, supplied_secret)
