"""
Mounjaro Tracker Backend — Credential Authenticator
=====================================================

What:  Verifies an email/password pair and returns the identity to embed in
       a new session token.
Why:   Login is the only place a session can be created; it must answer
       the same way for "no such account" and "wrong password" so the
       endpoint cannot be used to discover who has an account.
How:   Lowercase the email, load the credential record, bcrypt-compare.

Contract:
    authorize(db, email, password) -> SessionIdentity | None

    None covers: empty email, empty password, unknown email, wrong password.
    The login route turns every None into the same 401 with
    "Invalid email or password".

Timing:
    For an unknown email a bcrypt comparison is still run against a fixed
    dummy hash, so both failure branches cost one bcrypt check.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tracker.security.passwords import PasswordHasher
from tracker.security.session_token import SessionIdentity
from tracker.services.user_service import UserService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class CredentialAuthenticator:
    """Email + password → identity, with no account-existence leakage."""

    def __init__(self, users: UserService, hasher: PasswordHasher):
        self._users = users
        self._hasher = hasher
        # Same cost factor as real hashes so the unknown-email branch takes as long
        self._dummy_hash = hasher.hash_sync("not-a-real-password")

    async def authorize(
        self,
        db: AsyncSession,
        email: Optional[str],
        password: Optional[str],
    ) -> Optional[SessionIdentity]:
        if not email or not password:
            return None

        user = await self._users.get_by_email(db, email)

        if user is None:
            await self._hasher.verify(password, self._dummy_hash)
            logger.info("Login failed: unknown account")
            return None

        if not await self._hasher.verify(password, user.password_hash):
            logger.info("Login failed: wrong password for user %s", user.id)
            return None

        logger.info("Login succeeded for user %s", user.id)
        return SessionIdentity(user_id=user.id, email=user.email)
