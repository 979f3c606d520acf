"""
Mounjaro Tracker Backend — User & Password Reset SQLAlchemy Models
====================================================================

What:  ORM models for the `users` and `password_reset_tokens` tables.
Why:   The credential record is what the login flow checks passwords against;
       reset tokens let a user replace a forgotten password.
Who:   Used by AuthService, PasswordResetService and the session verifier
       (which confirms the user in a session token still exists).

Table Design Rationale:
    - UUID primary key: non-sequential ids cannot be enumerated
    - email: stored lowercased and UNIQUE; every lookup lowercases first, so
      "Alice@Example.com" and "alice@example.com" are the same account
    - password_hash: bcrypt output (60 chars), never the password itself
    - Timestamps are timezone-aware UTC

Portability:
    Column types are the generic SQLAlchemy ones (Uuid, DateTime) and
    defaults are generated in Python, so the same models run on PostgreSQL
    in production and on SQLite in the test suite.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from tracker.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    Credential record for one account.

    Lifecycle:
        1. Created at registration (email lowercased, password bcrypt-hashed)
        2. Read at every login and by the authoritative session verifier
        3. password_hash replaced by a successful password reset
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Lowercase-normalized login email",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash of the user's password",
    )

    email_verified: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    def __repr__(self) -> str:
        # Never include password_hash
        return f"<User(id={self.id}, email='{self.email}')>"


class PasswordResetToken(Base):
    """
    Single-use password reset token.

    Lifecycle:
        1. Created by POST /api/auth/forgot-password (expires after 1 hour)
        2. Consumed by POST /api/auth/reset-password → used_at is set
        3. A token is valid only while used_at IS NULL AND expires_at > now
    """

    __tablename__ = "password_reset_tokens"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # 32 random bytes, hex encoded (64 chars)
    token: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    used_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        Index("idx_password_reset_tokens_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<PasswordResetToken(id={self.id}, user_id={self.user_id}, "
            f"used={self.used_at is not None})>"
        )
