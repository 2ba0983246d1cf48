"""Access level resolution for collaboration sessions.

A session is read-write only when it presents the document's modification
secret. Everything else is downgraded to read-only, except a reference to a
document that does not exist, which refuses the session outright.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
from uuid import UUID

from sqlalchemy.orm import Session

from ..documents.validation import parse_document_id
from .secrets import load_modification_secret, secrets_match

logger = logging.getLogger(__name__)

READ_ONLY_SENTINEL = "readOnly"


class AccessLevel(str, Enum):
    """Effective permission of a collaboration session."""

    READ_ONLY = "read_only"
    READ_WRITE = "read_write"


class DocumentNotFoundError(Exception):
    """Raised when a session references a document that does not exist."""

    def __init__(self, document_id: Union[str, UUID, None] = None):
        self.document_id = document_id
        super().__init__("Document not found!")


@dataclass
class ConnectionConfiguration:
    """Per-session settings the collaboration runtime consults."""

    read_only: bool = False
    is_authenticated: bool = False


def resolve_access_level(
    db: Session,
    document_id: Union[str, UUID, None],
    secret: Optional[str],
) -> AccessLevel:
    """Derive the access level for a session.

    Resolution order:
        1. No secret, or the read-only sentinel -> READ_ONLY (store untouched)
        2. Malformed document id -> READ_ONLY
        3. Document absent -> DocumentNotFoundError
        4. Secret matches -> READ_WRITE, otherwise READ_ONLY

    Raises:
        DocumentNotFoundError: If the document does not exist
    """
    if not secret or secret == READ_ONLY_SENTINEL:
        return AccessLevel.READ_ONLY

    doc_uuid = parse_document_id(document_id)
    if doc_uuid is None:
        logger.info("Malformed document id in session, downgrading to read-only",
                    extra={"document_id": str(document_id)})
        return AccessLevel.READ_ONLY

    stored = load_modification_secret(db, doc_uuid)
    if stored is None:
        raise DocumentNotFoundError(doc_uuid)

    if secrets_match(stored, secret):
        return AccessLevel.READ_WRITE

    logger.info("Modification secret mismatch, session is read-only",
                extra={"document_id": str(doc_uuid)})
    return AccessLevel.READ_ONLY


def apply_access_level(config: ConnectionConfiguration, level: AccessLevel) -> ConnectionConfiguration:
    """Write the resolved access level into the session configuration."""
    config.read_only = level != AccessLevel.READ_WRITE
    return config
