"""Callbacks invoked by the real-time collaboration runtime.

The runtime owns the CRDT merge and the wire protocol. It calls these hooks
to load and persist a document's binary state and to decide whether a
connecting session may write. Each hook opens and closes its own session.
"""

import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ..access.resolver import (
    ConnectionConfiguration,
    DocumentNotFoundError,
    apply_access_level,
    resolve_access_level,
)
from ..documents.service import (
    document_exists,
    fetch_document,
    update_document_snapshot,
    update_last_accessed_at,
)
from ..documents.snapshot import empty_document_snapshot

logger = logging.getLogger(__name__)


class CollaborationHooks:
    """Persistence and authorization hooks for collaboration sessions.

    Args:
        session_factory: Callable returning a new database session
        snapshot_factory: Callable producing the state of a document that
            has never been stored
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        snapshot_factory: Callable[[], bytes] = empty_document_snapshot,
    ):
        self.session_factory = session_factory
        self.snapshot_factory = snapshot_factory

    async def on_fetch(self, document_name: str) -> bytes:
        """Return the stored snapshot, or an empty document if there is none."""
        with self.session_factory() as db:
            document = fetch_document(db, document_name)

        if document is None or not document.data:
            return self.snapshot_factory()
        return document.data

    async def on_store(self, document_name: str, state: Optional[bytes]) -> None:
        with self.session_factory() as db:
            stored = update_document_snapshot(db, document_name, state)

        if not stored:
            logger.warning("Snapshot not stored", extra={"document_id": document_name})

    async def on_connect(self, document_name: str) -> None:
        """Refuse sessions for documents that do not exist.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        with self.session_factory() as db:
            exists = document_exists(db, document_name)

        if not exists:
            raise DocumentNotFoundError(document_name)

    async def on_authenticate(
        self,
        document_name: str,
        connection_config: ConnectionConfiguration,
        token: Optional[str],
    ) -> ConnectionConfiguration:
        """Resolve the session's access level from its token.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        with self.session_factory() as db:
            level = resolve_access_level(db, document_name, token)

        connection_config.is_authenticated = True
        return apply_access_level(connection_config, level)

    async def after_load_document(self, document_name: str) -> None:
        with self.session_factory() as db:
            update_last_accessed_at(db, document_name)
