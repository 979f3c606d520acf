"""
Mounjaro Tracker Backend — Profile Service
============================================

What:  Onboarding profile persistence and the "does a profile exist?"
       capability used by the session verifier.
Why:   A profile row marks onboarding as complete. The session-plus-profile
       verification level depends on exists(); onboarding and settings
       depend on create() and update().
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.exceptions import ConflictError, DatabaseError, NotFoundError, ValidationError
from tracker.models.profile import Profile
from tracker.models.user import utcnow
from tracker.schemas.profile import GOAL_ABOVE_START_MESSAGE, ProfileCreate, ProfileUpdate

logger = logging.getLogger(__name__)

# Stored as NUMERIC(5, 2)
DECIMAL_FIELDS = {"height_cm", "starting_weight_kg", "goal_weight_kg"}


def _to_decimal(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


class ProfileService:
    """CRUD for the single profile row of a user."""

    async def find(self, db: AsyncSession, user_id: UUID) -> Optional[Profile]:
        try:
            result = await db.execute(select(Profile).where(Profile.user_id == user_id))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching profile for %s: %s", user_id, str(e))
            raise DatabaseError(context={"operation": "get_profile"})

    async def exists(self, db: AsyncSession, user_id: UUID) -> bool:
        try:
            result = await db.execute(select(Profile.id).where(Profile.user_id == user_id))
            return result.first() is not None
        except SQLAlchemyError as e:
            logger.error("Database error checking profile for %s: %s", user_id, str(e))
            raise DatabaseError(context={"operation": "profile_exists"})

    async def get(self, db: AsyncSession, user_id: UUID) -> Profile:
        """Raises NotFoundError if the user has not completed onboarding."""
        profile = await self.find(db, user_id)
        if profile is None:
            raise NotFoundError(resource="profile")
        return profile

    async def create(self, db: AsyncSession, user_id: UUID, data: ProfileCreate) -> Profile:
        """
        Complete onboarding by creating the profile.

        Raises:
            ConflictError: the user already has a profile (→ 409)
        """
        if await self.exists(db, user_id):
            raise ConflictError("Profile already exists. Onboarding already completed.")

        values = data.model_dump()
        for name in DECIMAL_FIELDS:
            values[name] = _to_decimal(values[name])

        profile = Profile(user_id=user_id, **values)
        db.add(profile)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating profile for %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not save your profile. Please try again.",
                context={"operation": "create_profile"},
            )

        logger.info("Onboarding completed for user %s", user_id)
        return profile

    async def update(self, db: AsyncSession, user_id: UUID, data: ProfileUpdate) -> Profile:
        """
        Apply the fields present in `data`; untouched fields keep their values.

        Raises:
            NotFoundError:   no profile yet (→ 404)
            ValidationError: the resulting goal weight is not below the
                             resulting starting weight (→ 400)
        """
        profile = await self.get(db, user_id)

        changes = data.model_dump(exclude_unset=True)
        starting = changes.get("starting_weight_kg", profile.starting_weight_kg)
        goal = changes.get("goal_weight_kg", profile.goal_weight_kg)
        if _to_decimal(goal) >= _to_decimal(starting):
            raise ValidationError(GOAL_ABOVE_START_MESSAGE, field="goal_weight_kg")

        for name, value in changes.items():
            if name in DECIMAL_FIELDS and value is not None:
                value = _to_decimal(value)
            setattr(profile, name, value)
        profile.updated_at = utcnow()

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating profile for %s: %s", user_id, str(e))
            raise DatabaseError(context={"operation": "update_profile"})
        return profile
