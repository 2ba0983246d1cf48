"""Identifier validation for documents and images.

Identifiers arrive from URLs and collaboration room names, so anything that
is not a well-formed UUID is rejected before it reaches the database.
"""

from typing import Optional, Union
from uuid import UUID


def parse_document_id(value: Union[str, UUID, None]) -> Optional[UUID]:
    """Parse an identifier into a UUID.

    Returns:
        UUID if ``value`` is a well-formed identifier, otherwise None

    Example:
        >>> parse_document_id("00000000-0000-0000-0000-000000000000")
        UUID('00000000-0000-0000-0000-000000000000')
        >>> parse_document_id("invalid") is None
        True
    """
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return UUID(value)
    except ValueError:
        return None
