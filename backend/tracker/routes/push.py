"""
Mounjaro Tracker Backend — Push Subscription Route Handlers
=============================================================

What:  POST and DELETE /api/push/subscribe.
Why:   Injection reminders are delivered as web push; the browser hands us
       its subscription after the user grants permission.
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.context import AppContext
from tracker.dependencies import get_context, get_db_session, require_identity
from tracker.schemas.common import ErrorResponse
from tracker.schemas.push import (
    PushSubscribeRequest,
    PushSubscriptionResult,
    PushUnsubscribeRequest,
)
from tracker.security.session_token import SessionIdentity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/push", tags=["Push"])


@router.post(
    "/subscribe",
    response_model=PushSubscriptionResult,
    status_code=201,
    responses={
        200: {"description": "Existing subscription updated", "model": PushSubscriptionResult},
        401: {"description": "Not signed in", "model": ErrorResponse},
    },
    summary="Save a browser push subscription",
)
async def subscribe(
    body: PushSubscribeRequest,
    response: Response,
    identity: SessionIdentity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> PushSubscriptionResult:
    """201 when the endpoint is new, 200 when an existing one was refreshed."""
    created = await context.push.subscribe(
        db,
        user_id=identity.user_id,
        endpoint=body.endpoint,
        p256dh=body.keys.p256dh,
        auth=body.keys.auth,
    )
    if created:
        return PushSubscriptionResult(message="Subscription saved")

    response.status_code = 200
    return PushSubscriptionResult(message="Subscription updated")


@router.delete(
    "/subscribe",
    response_model=PushSubscriptionResult,
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
        404: {"description": "Subscription not found", "model": ErrorResponse},
    },
    summary="Remove a browser push subscription",
)
async def unsubscribe(
    body: PushUnsubscribeRequest,
    identity: SessionIdentity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> PushSubscriptionResult:
    await context.push.unsubscribe(db, identity.user_id, body.endpoint)
    return PushSubscriptionResult(message="Subscription removed")
