"""Access control: modification secrets and session access levels."""

from .resolver import (
    READ_ONLY_SENTINEL,
    AccessLevel,
    ConnectionConfiguration,
    DocumentNotFoundError,
    apply_access_level,
    resolve_access_level,
)
from .secrets import verify_modification_secret

__all__ = [
    "READ_ONLY_SENTINEL",
    "AccessLevel",
    "ConnectionConfiguration",
    "DocumentNotFoundError",
    "apply_access_level",
    "resolve_access_level",
    "verify_modification_secret",
]
