"""
Mounjaro Tracker Backend — Authoritative Session Verifier
===========================================================

What:  The single trusted gate for any code path that reads or mutates
       user-scoped data.
Why:   Perimeter-only authorization can be bypassed (CVE-2025-29927 let a
       crafted header skip framework middleware entirely). The edge gate is
       therefore advisory; this verifier runs inside the handler, next to
       the data, and is the real security boundary.
How:   Re-decodes the session token (signature + expiry) and then confirms
       against the database that the user still exists. Profile-aware
       levels additionally check the onboarding profile.

Verification levels:
    get_identity()                  → identity | None       (API handlers → 401)
    verify_session()                → Allowed | DenyRedirect("/login")
    verify_session_with_profile()   → ... | DenyRedirect("/onboarding")
    verify_session_for_onboarding() → ... | DenyRedirect("/summary") if already onboarded
    redirect_if_authenticated()     → DenyRedirect("/summary") | None  (auth pages)

Result type:
    Failure is a value, not an exception. Callers receive
    Allowed(identity) or DenyRedirect(target) and must branch on it; there
    is no code path that silently proceeds past a failed check because the
    identity is only reachable through Allowed.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from tracker.exceptions import SessionTokenError
from tracker.security.route_table import LANDING_PATH, LOGIN_PATH, ONBOARDING_PATH
from tracker.security.session_token import SessionIdentity, SessionTokenCodec
from tracker.services.profile_service import ProfileService
from tracker.services.user_service import UserService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Allowed:
    """Verification passed; `identity` is confirmed against the data store."""

    identity: SessionIdentity


@dataclass(frozen=True)
class DenyRedirect:
    """Verification failed; the caller must send the user to `target`."""

    target: str


VerificationResult = Union[Allowed, DenyRedirect]


class AuthoritativeSessionVerifier:
    """
    Data-bound session verification.

    Each call performs its own token decode and queries; concurrent requests
    with the same cookie are not coordinated.
    """

    def __init__(
        self,
        codec: SessionTokenCodec,
        users: UserService,
        profiles: ProfileService,
    ):
        self._codec = codec
        self._users = users
        self._profiles = profiles

    async def get_identity(
        self, db: AsyncSession, token: Optional[str]
    ) -> Optional[SessionIdentity]:
        """
        Resolve the confirmed identity for `token`, or None.

        Steps:
            1. Decrypt + verify signature and expiry
            2. Load the user by id; a deleted account invalidates the session
        """
        if not token:
            return None

        try:
            claims = self._codec.decode(token)
        except SessionTokenError as e:
            logger.info("Rejected session token: %s", e.message)
            return None

        user = await self._users.get_by_id(db, claims.user_id)
        if user is None:
            logger.warning("Session token refers to missing user %s", claims.user_id)
            return None

        return SessionIdentity(user_id=user.id, email=user.email)

    async def verify_session(
        self, db: AsyncSession, token: Optional[str]
    ) -> VerificationResult:
        """Session-only level, used by most data-fetching code."""
        identity = await self.get_identity(db, token)
        if identity is None:
            return DenyRedirect(LOGIN_PATH)
        return Allowed(identity)

    async def verify_session_with_profile(
        self, db: AsyncSession, token: Optional[str]
    ) -> VerificationResult:
        """Session-plus-profile level, used by the main authenticated area."""
        result = await self.verify_session(db, token)
        if isinstance(result, DenyRedirect):
            return result

        if not await self._profiles.exists(db, result.identity.user_id):
            return DenyRedirect(ONBOARDING_PATH)
        return result

    async def verify_session_for_onboarding(
        self, db: AsyncSession, token: Optional[str]
    ) -> VerificationResult:
        """Onboarding pages: signed in, and not yet onboarded."""
        result = await self.verify_session(db, token)
        if isinstance(result, DenyRedirect):
            return result

        if await self._profiles.exists(db, result.identity.user_id):
            return DenyRedirect(LANDING_PATH)
        return result

    async def redirect_if_authenticated(
        self, db: AsyncSession, token: Optional[str]
    ) -> Optional[DenyRedirect]:
        """Auth pages (login, register, ...): send signed-in users to the landing page."""
        if await self.get_identity(db, token) is not None:
            return DenyRedirect(LANDING_PATH)
        return None
