"""
Mounjaro Tracker Backend — Profile & Onboarding Route Handlers
================================================================

What:  POST /api/onboarding/complete, GET and PUT /api/profile.
Why:   Completing onboarding creates the profile row, which is what moves a
       user from the onboarding level to the main authenticated area.
How:   require_identity for the caller, ProfileService for persistence.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.context import AppContext
from tracker.dependencies import get_context, get_db_session, require_identity
from tracker.schemas.common import ErrorResponse
from tracker.schemas.profile import (
    OnboardingCompleteResponse,
    ProfileCreate,
    ProfileResponse,
    ProfileUpdate,
)
from tracker.security.route_table import LANDING_PATH
from tracker.security.session_token import SessionIdentity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Profile"])


@router.post(
    "/onboarding/complete",
    response_model=OnboardingCompleteResponse,
    status_code=201,
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
        409: {"description": "Onboarding already completed", "model": ErrorResponse},
    },
    summary="Finish onboarding by saving the profile",
)
async def complete_onboarding(
    body: ProfileCreate,
    identity: SessionIdentity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> OnboardingCompleteResponse:
    profile = await context.profiles.create(db, identity.user_id, body)
    return OnboardingCompleteResponse(
        profile=ProfileResponse.model_validate(profile),
        redirect_to=LANDING_PATH,
    )


@router.get(
    "/profile",
    response_model=ProfileResponse,
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
        404: {"description": "Onboarding not completed", "model": ErrorResponse},
    },
    summary="Get the caller's profile",
)
async def get_profile(
    identity: SessionIdentity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> ProfileResponse:
    profile = await context.profiles.get(db, identity.user_id)
    return ProfileResponse.model_validate(profile)


@router.put(
    "/profile",
    response_model=ProfileResponse,
    responses={
        400: {"description": "Goal weight not below starting weight", "model": ErrorResponse},
        401: {"description": "Not signed in", "model": ErrorResponse},
        404: {"description": "Onboarding not completed", "model": ErrorResponse},
    },
    summary="Update profile fields",
)
async def update_profile(
    body: ProfileUpdate,
    identity: SessionIdentity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> ProfileResponse:
    """Partial update: only fields present in the body are changed."""
    profile = await context.profiles.update(db, identity.user_id, body)
    return ProfileResponse.model_validate(profile)
