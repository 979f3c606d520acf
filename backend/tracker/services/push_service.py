"""
Mounjaro Tracker Backend — Push Subscription Service
======================================================

What:  Stores and removes browser push subscriptions for reminders.
Why:   The notification job (outside this service) reads these rows.

Ownership rules:
    - subscribe(): an endpoint that already exists is re-assigned to the
      caller with the new keys (browser profiles can change hands)
    - unsubscribe(): only deletes rows owned by the caller; anything else
      is reported as not found
"""

import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.exceptions import DatabaseError, NotFoundError
from tracker.models.push_subscription import PushSubscription
from tracker.models.user import utcnow

logger = logging.getLogger(__name__)


class PushService:
    """Persistence for PushSubscription rows."""

    async def subscribe(
        self, db: AsyncSession, user_id: UUID, endpoint: str, p256dh: str, auth: str
    ) -> bool:
        """
        Upsert a subscription.

        Returns:
            True if a new row was created, False if an existing one was updated.
        """
        try:
            result = await db.execute(
                select(PushSubscription).where(PushSubscription.endpoint == endpoint)
            )
            existing = result.scalar_one_or_none()

            if existing is not None:
                existing.user_id = user_id
                existing.p256dh = p256dh
                existing.auth = auth
                existing.updated_at = utcnow()
                await db.flush()
                logger.info("Push subscription updated for user %s", user_id)
                return False

            db.add(
                PushSubscription(user_id=user_id, endpoint=endpoint, p256dh=p256dh, auth=auth)
            )
            await db.flush()
            logger.info("Push subscription created for user %s", user_id)
            return True
        except SQLAlchemyError as e:
            logger.error("Database error saving push subscription: %s", str(e))
            raise DatabaseError(context={"operation": "push_subscribe"})

    async def unsubscribe(self, db: AsyncSession, user_id: UUID, endpoint: str) -> None:
        """Raises NotFoundError if the caller owns no subscription for `endpoint`."""
        try:
            result = await db.execute(
                delete(PushSubscription)
                .where(
                    PushSubscription.user_id == user_id,
                    PushSubscription.endpoint == endpoint,
                )
            )
            deleted = result.rowcount
        except SQLAlchemyError as e:
            logger.error("Database error removing push subscription: %s", str(e))
            raise DatabaseError(context={"operation": "push_unsubscribe"})

        if not deleted:
            raise NotFoundError(resource="subscription")
        logger.info("Push subscription removed for user %s", user_id)
