"""
Mounjaro Tracker Backend — Optimistic Session Reader
======================================================

What:  Claims-only view of the session cookie for the edge gate.
Why:   The edge gate runs on every page request and must stay cheap, so it
       only asks "does a structurally valid, unexpired token exist?".
How:   Decodes the token with the codec. No database, no I/O.

Trust level:
    ADVISORY ONLY. A token that decodes here may belong to a deleted user.
    Nothing that reads or writes user data may rely on this class; use
    AuthoritativeSessionVerifier instead. The two classes share no base type
    on purpose so one cannot be passed where the other is expected.
"""

import logging
from typing import Optional

from tracker.exceptions import SessionTokenError
from tracker.security.session_token import SessionClaims, SessionTokenCodec

logger = logging.getLogger(__name__)


class OptimisticSessionReader:
    """Reads session claims without touching the data store."""

    def __init__(self, codec: SessionTokenCodec):
        self._codec = codec

    def read_claims(self, token: Optional[str]) -> Optional[SessionClaims]:
        """Return decoded claims, or None for a missing/invalid/expired token."""
        if not token:
            return None
        try:
            return self._codec.decode(token)
        except SessionTokenError as e:
            logger.debug("Ignoring unusable session cookie: %s", e.message)
            return None

    def has_session(self, token: Optional[str]) -> bool:
        return self.read_claims(token) is not None
