"""
Mounjaro Tracker Backend — Password Hashing
=============================================

What:  bcrypt hashing and verification of user passwords.
Why:   Stored hashes must be slow to brute-force and comparison must not
       leak timing information. bcrypt.checkpw compares in constant time.
How:   bcrypt runs in Starlette's threadpool so a 250ms hash does not stall
       the event loop for every other request.

72-byte limit:
    bcrypt only looks at the first 72 bytes of a password, and recent
    bcrypt releases raise instead of silently truncating. Passwords are
    truncated explicitly so long passphrases keep working exactly as they
    did when the existing hashes were created.
"""

import logging

import bcrypt
from starlette.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """bcrypt wrapper with a configurable cost factor."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash_sync(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")

    def verify_sync(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash; treat as a mismatch
            logger.error("Stored password hash is malformed")
            return False

    async def hash(self, password: str) -> str:
        return await run_in_threadpool(self.hash_sync, password)

    async def verify(self, password: str, password_hash: str) -> bool:
        return await run_in_threadpool(self.verify_sync, password, password_hash)
