"""
Mounjaro Tracker Backend — Session Token Codec
================================================

What:  Issues and decodes the session token stored in the session cookie.
Why:   The cookie is the only session state. Nothing is stored server-side,
       so the token must be tamper-proof (signed) and should not reveal the
       user's email to anyone who reads the cookie jar (encrypted).
How:   1. Claims {sub, email, iat, exp} are signed as an HS256 JWT (PyJWT)
       2. The JWT is encrypted with Fernet (AES-128-CBC + HMAC-SHA256)
       Decoding reverses both steps and validates expiry and required claims.

Token anatomy:
    cookie value = Fernet(key=sha256(secret)).encrypt(JWT(HS256, secret))

    sub    user id (UUID string)
    email  user email at issue time
    iat    issued-at (unix seconds)
    exp    iat + 30 days; there is no refresh and no server-side revocation

Failure semantics:
    Every problem (garbage input, wrong key, tampering, expiry, missing or
    malformed claims) raises SessionTokenError. Callers never need to know
    which one happened. The edge gate and the verifier both map it to
    "no session".
"""

import base64
import hashlib
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from cryptography.fernet import Fernet, InvalidToken

from tracker.exceptions import SessionTokenError

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["sub", "email", "iat", "exp"]


@dataclass(frozen=True)
class SessionIdentity:
    """The minimal identity carried by a session: who, and their email."""

    user_id: uuid.UUID
    email: str


@dataclass(frozen=True)
class SessionClaims:
    """Decoded, signature- and expiry-checked token contents."""

    user_id: uuid.UUID
    email: str
    issued_at: datetime
    expires_at: datetime

    @property
    def identity(self) -> SessionIdentity:
        return SessionIdentity(user_id=self.user_id, email=self.email)


def _derive_fernet_key(secret: str) -> bytes:
    """Fernet wants 32 url-safe base64 bytes; derive them from the secret."""
    digest = hashlib.sha256(secret.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest)


class SessionTokenCodec:
    """
    Stateless encoder/decoder for session tokens.

    One instance lives on AppContext and is shared by the login route
    (issue), the edge gate and the authoritative verifier (decode).
    """

    def __init__(self, secret: str, max_age: timedelta):
        self._secret = secret
        self._fernet = Fernet(_derive_fernet_key(secret))
        self.max_age = max_age

    def issue(self, identity: SessionIdentity, now: Optional[datetime] = None) -> str:
        """Create a token for `identity` valid for max_age from `now`."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(identity.user_id),
            "email": identity.email,
            "iat": issued_at,
            "exp": issued_at + self.max_age,
        }
        signed = jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)
        return self._fernet.encrypt(signed.encode("utf-8")).decode("utf-8")

    def decode(self, token: str) -> SessionClaims:
        """
        Decrypt and verify `token`.

        Raises:
            SessionTokenError: for any reason the token cannot be trusted.
        """
        if not token:
            raise SessionTokenError("Empty session token")

        try:
            signed = self._fernet.decrypt(token.encode("utf-8"))
        except (InvalidToken, ValueError) as e:
            raise SessionTokenError(
                "Session token could not be decrypted",
                context={"reason": type(e).__name__},
            ) from e

        try:
            payload = jwt.decode(
                signed,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as e:
            raise SessionTokenError("Session token expired", context={"reason": "expired"}) from e
        except jwt.InvalidTokenError as e:
            raise SessionTokenError(
                "Session token failed verification",
                context={"reason": type(e).__name__},
            ) from e

        try:
            user_id = uuid.UUID(str(payload["sub"]))
        except ValueError as e:
            raise SessionTokenError("Session token has a malformed subject") from e

        email = payload["email"]
        if not isinstance(email, str) or not email:
            raise SessionTokenError("Session token has no email")

        return SessionClaims(
            user_id=user_id,
            email=email,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
