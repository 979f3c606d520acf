"""
Mounjaro Tracker Backend — Authentication Route Handlers
==========================================================

What:  Sign in, sign out, session lookup, registration and password reset.
Why:   The only place a session cookie is created or destroyed.
How:   Thin handlers; CredentialAuthenticator, AuthService and
       PasswordResetService own the rules, SessionTokenCodec mints tokens.

Session cookie:
    name      settings.session_cookie_name ("tracker_session")
    flags     HttpOnly, SameSite=Lax, Secure when session_cookie_secure
    lifetime  settings.session_max_age_days (30), fixed, no sliding refresh

Failed sign-in always answers 401 "Invalid email or password", whatever
the reason (unknown email, wrong password, blank fields).
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.context import AppContext
from tracker.dependencies import get_context, get_db_session, require_identity
from tracker.exceptions import AuthenticationError
from tracker.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    SessionResponse,
    UserResponse,
)
from tracker.schemas.common import ErrorResponse, MessageResponse
from tracker.security.authenticator import INVALID_CREDENTIALS_MESSAGE
from tracker.security.session_token import SessionIdentity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

SIGNED_OUT_MESSAGE = "Signed out"


def _set_session_cookie(response: Response, context: AppContext, token: str) -> None:
    settings = context.settings
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


@router.post(
    "/login",
    response_model=SessionResponse,
    responses={
        401: {"description": "Invalid email or password", "model": ErrorResponse},
        429: {"description": "Too many attempts", "model": ErrorResponse},
    },
    summary="Sign in with email and password",
)
async def login(
    body: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> SessionResponse:
    """Verify credentials and set the encrypted session cookie."""
    identity = await context.authenticator.authorize(db, body.email, body.password)
    if identity is None:
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    token = context.token_codec.issue(identity)
    _set_session_cookie(response, context, token)

    return SessionResponse(user=UserResponse(id=identity.user_id, email=identity.email))


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Sign out",
)
async def logout(
    response: Response,
    context: AppContext = Depends(get_context),
) -> MessageResponse:
    """
    Clear the session cookie.

    Tokens are stateless, so a copy of the cookie taken before sign-out
    stays valid until it expires.
    """
    response.delete_cookie(
        key=context.settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=context.settings.session_cookie_secure,
        samesite="lax",
    )
    return MessageResponse(message=SIGNED_OUT_MESSAGE)


@router.get(
    "/session",
    response_model=SessionResponse,
    responses={401: {"description": "No valid session", "model": ErrorResponse}},
    summary="Current signed-in user",
)
async def get_session(
    identity: SessionIdentity = Depends(require_identity),
) -> SessionResponse:
    return SessionResponse(user=UserResponse(id=identity.user_id, email=identity.email))


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=201,
    responses={
        400: {"description": "Password too weak", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> RegisterResponse:
    """
    Create an account. Does not sign the user in; the client follows up
    with POST /api/auth/login.
    """
    user = await context.auth_service.register(db, body.email, body.password)
    return RegisterResponse(user=UserResponse.model_validate(user))


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    summary="Request a password reset link",
)
async def forgot_password(
    body: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> MessageResponse:
    """Always 200 with the same message, so callers cannot probe for accounts."""
    message = await context.password_resets.request_reset(db, body.email)
    return MessageResponse(message=message)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    responses={400: {"description": "Weak password or bad token", "model": ErrorResponse}},
    summary="Set a new password with a reset token",
)
async def reset_password(
    body: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> MessageResponse:
    message = await context.password_resets.reset_password(db, body.token, body.password)
    return MessageResponse(message=message)
