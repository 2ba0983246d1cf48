"""Identity token signing and verification

The identity cookie carries a JWT issued by a companion service that knows
who the user is. This backend only verifies it; the one claim it reads is
``pid``, the caller's external person id.

Token Claims:
- pid: External person id (string)
- iat: Issued-at timestamp (optional)
- exp: Expiration timestamp (optional, enforced when present)

Security Properties:
- Algorithm: HS256 only. Tokens announcing any other algorithm are rejected.
- Secret: JWT_SECRET environment variable
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

ALGORITHM = 'HS256'
PERSON_ID_CLAIM = 'pid'


def create_identity_token(
    pid: str,
    secret: str,
    expires_in: Optional[timedelta] = None,
) -> str:
    """Create a signed identity token for ``pid``.

    Args:
        pid: External person id
        secret: Signing secret (JWT_SECRET)
        expires_in: Optional lifetime; tokens without it never expire

    Returns:
        str: Signed JWT token
    """
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        PERSON_ID_CLAIM: pid,
        'iat': int(now.timestamp()),
    }
    if expires_in is not None:
        payload['exp'] = int((now + expires_in).timestamp())

    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def decode_identity_token(token: str, secret: str) -> Dict[str, Any]:
    """Decode and validate an identity token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid, tampered or uses another algorithm
    """
    return jwt.decode(token, secret, algorithms=[ALGORITHM])
