"""
Mounjaro Tracker Backend — Page Route Handlers
================================================

What:  JSON placeholders for the application's pages, each guarded by the
       authoritative verification level it needs.
Why:   The edge gate only guesses from the cookie. These handlers are where
       a deleted account or a missing profile is actually caught.
How:   Call the verifier, turn DenyRedirect into a 307, otherwise describe
       the page and who is viewing it.

Levels:
    "/"                                   public
    /login /register /forgot-password
    /reset-password                       redirect_if_authenticated
    /summary /results /jabs /calendar
    /settings /log /weight                session + profile
    /onboarding                           session, no profile yet

Stale cookies:
    A token that decrypts but names a missing account passes the edge gate
    as "signed in". When a handler denies such a session with a redirect to
    /login it also deletes the cookie, otherwise the gate would bounce
    /login straight back to /summary.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.context import AppContext
from tracker.dependencies import get_context, get_db_session, get_session_token
from tracker.schemas.common import PageResponse
from tracker.security.route_table import LOGIN_PATH
from tracker.security.verifier import DenyRedirect, VerificationResult

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])

AUTH_PAGES = ("login", "register", "forgot-password", "reset-password")
MAIN_PAGES = ("summary", "results", "jabs", "calendar", "settings", "log", "weight")


def _redirect(denial: DenyRedirect, context: AppContext) -> RedirectResponse:
    response = RedirectResponse(denial.target, status_code=307)
    if denial.target == LOGIN_PATH:
        response.delete_cookie(context.settings.session_cookie_name, path="/")
    return response


def _render(page: str, result: VerificationResult, context: AppContext):
    if isinstance(result, DenyRedirect):
        return _redirect(result, context)
    return PageResponse(
        page=page, user_id=result.identity.user_id, email=result.identity.email
    )


@router.get("/", response_model=PageResponse, summary="Landing page")
async def home() -> PageResponse:
    return PageResponse(page="home")


def _auth_page(page: str):
    async def handler(
        token: Optional[str] = Depends(get_session_token),
        db: AsyncSession = Depends(get_db_session),
        context: AppContext = Depends(get_context),
    ):
        denial = await context.session_verifier.redirect_if_authenticated(db, token)
        if denial is not None:
            return _redirect(denial, context)
        return PageResponse(page=page)

    handler.__name__ = f"{page.replace('-', '_')}_page"
    return handler


def _main_page(page: str):
    async def handler(
        token: Optional[str] = Depends(get_session_token),
        db: AsyncSession = Depends(get_db_session),
        context: AppContext = Depends(get_context),
    ):
        result = await context.session_verifier.verify_session_with_profile(db, token)
        return _render(page, result, context)

    handler.__name__ = f"{page}_page"
    return handler


for _page in AUTH_PAGES:
    router.add_api_route(
        f"/{_page}",
        _auth_page(_page),
        methods=["GET"],
        response_model=PageResponse,
        summary=f"{_page} page (signed-out visitors)",
    )

for _page in MAIN_PAGES:
    router.add_api_route(
        f"/{_page}",
        _main_page(_page),
        methods=["GET"],
        response_model=PageResponse,
        summary=f"{_page} page (requires a completed profile)",
    )


@router.get("/onboarding", response_model=PageResponse, summary="Onboarding page")
async def onboarding_page(
    token: Optional[str] = Depends(get_session_token),
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
):
    result = await context.session_verifier.verify_session_for_onboarding(db, token)
    return _render("onboarding", result, context)
