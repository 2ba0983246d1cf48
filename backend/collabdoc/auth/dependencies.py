"""FastAPI dependencies for identity and modification secrets.

Usage:
    @router.get("/documents")
    def list_documents(owner: Optional[str] = Depends(get_owner_external_id)):
        ...

    @router.delete("/documents/{document_id}")
    def delete(document: Document = Depends(require_document_permission)):
        ...
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from ..access.secrets import secrets_match
from ..config import get_settings
from ..database import get_db
from ..documents.validation import parse_document_id
from ..images.service import get_image
from ..models import Document, Image
from .identity import IdentityExtractor


def get_identity_extractor() -> IdentityExtractor:
    settings = get_settings()
    return IdentityExtractor(
        secret=settings.JWT_SECRET,
        cookie_name=settings.IDENTITY_COOKIE_NAME,
    )


def get_owner_external_id(
    request: Request,
    extractor: IdentityExtractor = Depends(get_identity_extractor),
) -> Optional[str]:
    """External identity of the caller, or None for anonymous callers."""
    return extractor.extract(request.headers.get("cookie"))


def get_modification_secret(
    authorization: Optional[str] = Header(default=None),
) -> Optional[str]:
    """Modification secret, sent raw in the ``Authorization`` header."""
    return authorization or None


def _check_secret(document: Document, secret: Optional[str]) -> None:
    if not secrets_match(document.modification_secret, secret):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid modification secret",
        )


def require_document_permission(
    document_id: str,
    secret: Optional[str] = Depends(get_modification_secret),
    db: Session = Depends(get_db),
) -> Document:
    """Load a document and check the caller holds its modification secret.

    Raises:
        HTTPException 404: If the document does not exist (or the id is malformed)
        HTTPException 403: If the secret is missing or wrong
    """
    doc_uuid = parse_document_id(document_id)
    document = None
    if doc_uuid is not None:
        document = db.query(Document).filter(Document.id == doc_uuid).first()

    if document is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found",
        )

    _check_secret(document, secret)
    return document


def require_image_permission(
    image_id: str,
    secret: Optional[str] = Depends(get_modification_secret),
    db: Session = Depends(get_db),
) -> Image:
    """Load an image and check the caller holds its document's secret.

    Raises:
        HTTPException 404: If the image does not exist
        HTTPException 403: If the secret is missing or wrong
    """
    image = get_image(db, image_id)
    if image is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Image not found",
        )

    _check_secret(image.document, secret)
    return image
