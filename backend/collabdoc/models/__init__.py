"""SQLAlchemy Models for the collaboration backend"""

from .base import Base
from .document import Document
from .image import Image

__all__ = [
    "Base",
    "Document",
    "Image",
]
