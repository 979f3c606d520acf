"""
Mounjaro Tracker Backend — User Service
=========================================

What:  Data access for credential records (the `users` table).
Why:   Login, registration, password reset and the session verifier all
       need the same few lookups; keeping them here means the email
       normalization rule lives in exactly one place.
How:   Stateless methods that receive the request's AsyncSession.

Email normalization:
    Emails are stripped and lowercased on the way in AND on every lookup.
    The column is UNIQUE on the normalized value, so case variants can never
    become separate accounts.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.exceptions import ConflictError, DatabaseError
from tracker.models.user import User, utcnow

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "An account with this email already exists"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Lookup and persistence of User rows."""

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        """Case-insensitive lookup by email. Returns None if absent."""
        try:
            result = await db.execute(
                select(User).where(User.email == normalize_email(email))
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user by email: %s", str(e))
            raise DatabaseError(context={"operation": "get_user_by_email"})

    async def get_by_id(self, db: AsyncSession, user_id: UUID) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.id == user_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user %s: %s", user_id, str(e))
            raise DatabaseError(context={"operation": "get_user_by_id"})

    async def create(self, db: AsyncSession, email: str, password_hash: str) -> User:
        """
        Insert a new user; flush() assigns the id without committing.

        The caller hashes the password and checks for an existing account
        first. Two registrations racing past that check still meet the
        UNIQUE constraint here, and the loser gets the same 409.

        Raises:
            ConflictError: the email is already taken (→ 409)
            DatabaseError: any other database failure (→ 500)
        """
        user = User(email=normalize_email(email), password_hash=password_hash)
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            logger.info("Registration lost a race for an existing email")
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
        except SQLAlchemyError as e:
            logger.error("Database error creating user: %s", str(e))
            raise DatabaseError(
                message="Could not create the account. Please try again.",
                context={"operation": "create_user", "error_type": type(e).__name__},
            )
        return user

    async def set_password_hash(
        self, db: AsyncSession, user_id: UUID, password_hash: str
    ) -> None:
        try:
            await db.execute(
                update(User)
                .where(User.id == user_id)
                .values(password_hash=password_hash, updated_at=utcnow())
            )
        except SQLAlchemyError as e:
            logger.error("Database error updating password for %s: %s", user_id, str(e))
            raise DatabaseError(context={"operation": "set_password_hash"})
