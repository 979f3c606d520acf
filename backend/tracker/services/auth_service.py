"""
Mounjaro Tracker Backend — Account Service
============================================

What:  Registration and the password strength rules shared with reset.
Why:   Keeps route handlers thin: the route parses JSON, this module applies
       business rules and persists.

Password rules:
    - at least 8 characters
    - at least one lowercase letter, one uppercase letter, one digit
"""

import logging
import re

from sqlalchemy.ext.asyncio import AsyncSession

from tracker.exceptions import ConflictError, ValidationError
from tracker.models.user import User
from tracker.security.passwords import PasswordHasher
from tracker.services.user_service import DUPLICATE_EMAIL_MESSAGE, UserService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def validate_password_strength(password: str) -> None:
    """
    Raise ValidationError with the first rule `password` breaks.

    Messages are shown to the user as-is.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            field="password",
        )
    if not re.search(r"[a-z]", password):
        raise ValidationError(
            "Password must contain at least one lowercase letter", field="password"
        )
    if not re.search(r"[A-Z]", password):
        raise ValidationError(
            "Password must contain at least one uppercase letter", field="password"
        )
    if not re.search(r"[0-9]", password):
        raise ValidationError("Password must contain at least one number", field="password")


class AuthService:
    """Account creation."""

    def __init__(self, users: UserService, hasher: PasswordHasher):
        self._users = users
        self._hasher = hasher

    async def register(self, db: AsyncSession, email: str, password: str) -> User:
        """
        Create an account.

        Raises:
            ValidationError: password breaks a strength rule (→ 400)
            ConflictError:   email already registered (→ 409)
            DatabaseError:   insert failed (→ 500)
        """
        validate_password_strength(password)

        if await self._users.get_by_email(db, email) is not None:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        password_hash = await self._hasher.hash(password)
        user = await self._users.create(db, email, password_hash)
        logger.info("Registered new user %s", user.id)
        return user
