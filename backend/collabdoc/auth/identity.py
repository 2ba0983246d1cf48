"""Caller identity from the signed ``person_id`` cookie."""

import logging
from typing import Optional

import jwt
from starlette.requests import cookie_parser

from .jwt import PERSON_ID_CLAIM, decode_identity_token

logger = logging.getLogger(__name__)

DEFAULT_COOKIE_NAME = "person_id"


class IdentityExtractor:
    """Recovers the external person id from a raw ``Cookie`` header.

    Every failure (no header, no cookie, bad signature, foreign algorithm,
    missing claim, no configured secret) yields None: an unidentified caller
    is anonymous, never an error.

    Example:
        extractor = IdentityExtractor(secret=settings.JWT_SECRET)
        owner = extractor.extract(request.headers.get("cookie"))
    """

    def __init__(self, secret: Optional[str], cookie_name: str = DEFAULT_COOKIE_NAME):
        self.secret = secret
        self.cookie_name = cookie_name

    def extract(self, cookie_header: Optional[str]) -> Optional[str]:
        if not cookie_header:
            return None

        token = cookie_parser(cookie_header).get(self.cookie_name)
        if not token:
            return None

        if not self.secret:
            logger.warning("Identity cookie present but JWT_SECRET is not configured")
            return None

        try:
            payload = decode_identity_token(token, self.secret)
        except jwt.InvalidTokenError as e:
            logger.info("Rejected identity cookie", extra={"error": str(e)})
            return None

        pid = payload.get(PERSON_ID_CLAIM)
        if not isinstance(pid, str) or not pid:
            logger.info("Identity token has no person id claim")
            return None

        return pid
