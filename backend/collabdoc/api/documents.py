"""Document endpoints

Creating and listing documents needs no credential beyond the optional
identity cookie; deleting one requires its modification secret.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ..auth.dependencies import get_owner_external_id, require_document_permission
from ..database import get_db
from ..dependencies import get_optional_storage
from ..documents.service import create_document, delete_document, get_documents_by_owner
from ..models import Document
from ..storage import ObjectStoragePort
from .schemas import DocumentResponse

router = APIRouter(prefix="/documents", tags=["Documents"])


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_200_OK)
def create(
    owner_external_id: Optional[str] = Depends(get_owner_external_id),
    db: Session = Depends(get_db),
):
    """Create an empty document owned by the caller (if identified).

    The response carries the modification secret; it is the only time an
    anonymous creator sees it.
    """
    return create_document(db, owner_external_id)


@router.get("", response_model=List[DocumentResponse])
def list_own(
    owner_external_id: Optional[str] = Depends(get_owner_external_id),
    db: Session = Depends(get_db),
):
    """List the caller's documents, newest first. Anonymous callers get []."""
    return get_documents_by_owner(db, owner_external_id)


@router.delete("/{document_id}", status_code=status.HTTP_200_OK, response_class=Response)
async def delete(
    document: Document = Depends(require_document_permission),
    db: Session = Depends(get_db),
    storage: Optional[ObjectStoragePort] = Depends(get_optional_storage),
):
    """Delete a document, its images and their blobs.

    Unconfigured storage does not block the delete; orphaned blobs are logged.

    Raises:
        HTTPException 403: If the modification secret is wrong
        HTTPException 404: If the document does not exist
    """
    if not await delete_document(db, storage, document.id):
        # Removed concurrently between the permission check and the delete
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found",
        )
    return Response(status_code=status.HTTP_200_OK)
