"""
Mounjaro Tracker Backend — Password Reset Service
===================================================

What:  Issues and redeems single-use password reset tokens.
Why:   Users who forget their password need a way back in that does not
       reveal which emails have accounts.

Flow:
    POST /api/auth/forgot-password {email}
        → account exists: store token (1h), log the reset URL
        → either way: the SAME success message
    POST /api/auth/reset-password {token, password}
        → token unknown / used / expired: ValidationError (400)
        → otherwise: new bcrypt hash, token marked used

Delivery:
    Sending the email is not part of this service. The reset URL is logged
    so it can be picked up in development or by a log-based mail relay.
"""

import logging
import secrets
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.exceptions import DatabaseError, ValidationError
from tracker.models.user import PasswordResetToken, utcnow
from tracker.security.passwords import PasswordHasher
from tracker.services.auth_service import validate_password_strength
from tracker.services.user_service import UserService

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = "If an account exists with this email, a reset link has been sent."
RESET_COMPLETED_MESSAGE = "Password reset successfully. You can now log in with your new password."
INVALID_RESET_TOKEN_MESSAGE = "Invalid or expired reset token"


class PasswordResetService:
    """Forgot-password and reset-password workflows."""

    def __init__(
        self,
        users: UserService,
        hasher: PasswordHasher,
        base_url: str,
        expiry: timedelta,
    ):
        self._users = users
        self._hasher = hasher
        self._base_url = base_url
        self._expiry = expiry

    async def request_reset(self, db: AsyncSession, email: str) -> str:
        """
        Create a reset token if the account exists.

        Returns:
            The user-facing message, identical whether or not the email is
            registered.
        """
        user = await self._users.get_by_email(db, email)
        if user is None:
            logger.info("Password reset requested for unknown account")
            return RESET_REQUESTED_MESSAGE

        token = secrets.token_hex(32)
        db.add(
            PasswordResetToken(
                user_id=user.id,
                token=token,
                expires_at=utcnow() + self._expiry,
            )
        )
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error storing reset token: %s", str(e))
            raise DatabaseError(context={"operation": "create_reset_token"})

        reset_url = f"{self._base_url}/reset-password?token={token}"
        logger.info("Password reset URL for user %s: %s", user.id, reset_url)
        return RESET_REQUESTED_MESSAGE

    async def reset_password(self, db: AsyncSession, token: str, new_password: str) -> str:
        """
        Redeem `token` and set a new password.

        Raises:
            ValidationError: weak password, or token unknown/used/expired
        """
        validate_password_strength(new_password)

        try:
            result = await db.execute(
                select(PasswordResetToken).where(
                    PasswordResetToken.token == token,
                    PasswordResetToken.used_at.is_(None),
                    PasswordResetToken.expires_at > utcnow(),
                )
            )
            reset_token = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up reset token: %s", str(e))
            raise DatabaseError(context={"operation": "get_reset_token"})

        if reset_token is None:
            raise ValidationError(INVALID_RESET_TOKEN_MESSAGE, field="token")

        password_hash = await self._hasher.hash(new_password)
        await self._users.set_password_hash(db, reset_token.user_id, password_hash)

        reset_token.used_at = utcnow()
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error consuming reset token: %s", str(e))
            raise DatabaseError(context={"operation": "consume_reset_token"})

        logger.info("Password reset completed for user %s", reset_token.user_id)
        return RESET_COMPLETED_MESSAGE
