"""
Mounjaro Tracker Backend — Session Token Codec Tests
======================================================

What we test:
    ✅ issue → decode returns the same identity and a 30-day expiry
    ✅ The cookie value is encrypted (email not readable)
    ✅ Expired, tampered, foreign-key and garbage tokens all raise SessionTokenError
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from tracker.exceptions import SessionTokenError
from tracker.security.session_token import SessionIdentity, SessionTokenCodec

SECRET = "unit-test-secret-with-enough-length"


@pytest.fixture
def codec():
    return SessionTokenCodec(secret=SECRET, max_age=timedelta(days=30))


@pytest.fixture
def identity():
    return SessionIdentity(user_id=uuid4(), email="jane@example.com")


class TestIssueAndDecode:

    def test_decode_returns_identity(self, codec, identity):
        claims = codec.decode(codec.issue(identity))
        assert claims.identity == identity

    def test_expiry_is_thirty_days(self, codec, identity):
        now = datetime.now(timezone.utc).replace(microsecond=0)
        claims = codec.decode(codec.issue(identity, now=now))
        assert claims.expires_at - claims.issued_at == timedelta(days=30)

    def test_token_is_encrypted(self, codec, identity):
        token = codec.issue(identity)
        assert identity.email not in token
        # Not a bare JWT either
        assert token.count(".") != 2


class TestRejection:

    def test_expired_token(self, codec, identity):
        issued = datetime.now(timezone.utc) - timedelta(days=31)
        token = codec.issue(identity, now=issued)
        with pytest.raises(SessionTokenError):
            codec.decode(token)

    def test_token_from_other_secret(self, identity):
        other = SessionTokenCodec(secret="some-other-secret-entirely", max_age=timedelta(days=30))
        token = other.issue(identity)
        with pytest.raises(SessionTokenError):
            SessionTokenCodec(secret=SECRET, max_age=timedelta(days=30)).decode(token)

    def test_tampered_token(self, codec, identity):
        token = codec.issue(identity)
        tampered = token[:-4] + ("AAAA" if not token.endswith("AAAA") else "BBBB")
        with pytest.raises(SessionTokenError):
            codec.decode(tampered)

    @pytest.mark.parametrize("garbage", ["", "not-a-token", "a.b.c"])
    def test_garbage(self, codec, garbage):
        with pytest.raises(SessionTokenError):
            codec.decode(garbage)

    def test_missing_email_claim(self, codec):
        """A correctly encrypted and signed payload without email is still rejected."""
        now = datetime.now(timezone.utc)
        signed = jwt.encode(
            {"sub": str(uuid4()), "iat": now, "exp": now + timedelta(days=1)},
            SECRET,
            algorithm="HS256",
        )
        token = codec._fernet.encrypt(signed.encode("utf-8")).decode("utf-8")
        with pytest.raises(SessionTokenError):
            codec.decode(token)

    def test_malformed_subject(self, codec):
        now = datetime.now(timezone.utc)
        signed = jwt.encode(
            {"sub": "not-a-uuid", "email": "x@example.com", "iat": now, "exp": now + timedelta(days=1)},
            SECRET,
            algorithm="HS256",
        )
        token = codec._fernet.encrypt(signed.encode("utf-8")).decode("utf-8")
        with pytest.raises(SessionTokenError):
            codec.decode(token)
