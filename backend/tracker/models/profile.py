"""
Mounjaro Tracker Backend — Profile SQLAlchemy Model
=====================================================

What:  ORM model for the `profiles` table (one row per user).
Why:   A profile row is what "onboarding complete" means. The
       session-plus-profile verification level sends users without one to
       /onboarding.
Who:   ProfileService (create/read/update) and the session verifier
       (existence check only).
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from tracker.database import Base
from tracker.models.user import utcnow


class Profile(Base):
    """
    Treatment profile captured during onboarding.

    Numeric columns use NUMERIC(5, 2): enough for 999.99 kg/cm with exact
    decimal storage (no float rounding in progress calculations).
    """

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # UNIQUE: at most one profile per user
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    age: Mapped[int] = mapped_column(Integer, nullable=False)
    gender: Mapped[str] = mapped_column(String(20), nullable=False)
    height_cm: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    starting_weight_kg: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    goal_weight_kg: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    treatment_start_date: Mapped[date] = mapped_column(Date, nullable=False)

    # 0 = Sunday ... 6 = Saturday; NULL means no preference
    preferred_injection_day: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        default=None,
    )

    reminder_days_before: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        default=1,
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
        return f"<Profile(id={self.id}, user_id={self.user_id})>"
