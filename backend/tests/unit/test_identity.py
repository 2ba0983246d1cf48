"""Unit tests for identity token handling

Tests cover:
- Token creation and decoding
- Cookie extraction with valid and invalid tokens
- Algorithm restriction
- Missing secret handling
"""

from datetime import timedelta

import jwt
import pytest

from collabdoc.auth.identity import IdentityExtractor
from collabdoc.auth.jwt import create_identity_token, decode_identity_token

SECRET = "identity-secret-key-256-bits-minimum-length-required"


class TestIdentityToken:
    """Test create_identity_token / decode_identity_token"""

    def test_round_trip(self):
        token = create_identity_token("person-1", SECRET)
        payload = decode_identity_token(token, SECRET)

        assert payload["pid"] == "person-1"
        assert "iat" in payload

    def test_wrong_secret(self):
        token = create_identity_token("person-1", SECRET)

        with pytest.raises(jwt.InvalidTokenError):
            decode_identity_token(token, "other-secret")

    def test_expired_token(self):
        token = create_identity_token("person-1", SECRET, expires_in=timedelta(seconds=-10))

        with pytest.raises(jwt.ExpiredSignatureError):
            decode_identity_token(token, SECRET)


class TestIdentityExtractor:
    """Test IdentityExtractor.extract"""

    @pytest.fixture
    def extractor(self):
        return IdentityExtractor(secret=SECRET)

    def test_valid_cookie(self, extractor):
        token = create_identity_token("person-1", SECRET)
        assert extractor.extract(f"person_id={token}") == "person-1"

    def test_cookie_among_others(self, extractor):
        token = create_identity_token("person-1", SECRET)
        header = f"theme=dark; person_id={token}; lang=de"
        assert extractor.extract(header) == "person-1"

    def test_no_header(self, extractor):
        assert extractor.extract(None) is None
        assert extractor.extract("") is None

    def test_cookie_absent(self, extractor):
        assert extractor.extract("theme=dark") is None

    def test_wrong_key(self, extractor):
        token = create_identity_token("person-1", "some-other-key")
        assert extractor.extract(f"person_id={token}") is None

    def test_garbage_token(self, extractor):
        assert extractor.extract("person_id=not-a-jwt") is None

    def test_other_algorithm_rejected(self, extractor):
        token = jwt.encode({"pid": "person-1"}, SECRET, algorithm="HS512")
        assert extractor.extract(f"person_id={token}") is None

    def test_unsigned_token_rejected(self, extractor):
        token = jwt.encode({"pid": "person-1"}, None, algorithm="none")
        assert extractor.extract(f"person_id={token}") is None

    def test_missing_pid_claim(self, extractor):
        token = jwt.encode({"sub": "person-1"}, SECRET, algorithm="HS256")
        assert extractor.extract(f"person_id={token}") is None

    def test_no_secret_configured(self):
        token = create_identity_token("person-1", SECRET)
        assert IdentityExtractor(secret=None).extract(f"person_id={token}") is None

    def test_custom_cookie_name(self):
        token = create_identity_token("person-1", SECRET)
        extractor = IdentityExtractor(secret=SECRET, cookie_name="identity")

        assert extractor.extract(f"identity={token}") == "person-1"
        assert extractor.extract(f"person_id={token}") is None
