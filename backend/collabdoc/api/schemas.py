"""HTTP request/response schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class DocumentResponse(BaseModel):
    """A document as returned to its creator or owner"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Document UUID")
    modification_secret: str = Field(..., description="Secret granting write access")
    owner_external_id: Optional[str] = Field(None, description="External identity of the owner")
    created_at: datetime
    updated_at: datetime
    last_accessed_at: datetime


class ImageUploadResponse(BaseModel):
    """Response for a stored image"""
    image_url: str = Field(..., description="Relative URL of the image, e.g. images/<id>")


class PayloadTooLargeResponse(BaseModel):
    """Error response for uploads over the size limit"""
    error: str = Field(..., description="Error message")
    max_size_bytes: int = Field(..., description="Maximum allowed upload size")
