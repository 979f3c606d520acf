"""
Mounjaro Tracker Backend — FastAPI Dependencies
=================================================

What:  Small injectable helpers that route handlers declare with Depends().
Why:   Handlers should not know where the context, database session or
       session cookie come from.

    get_context        → AppContext stored on app.state by create_app()
    get_db_session     → per-request transactional AsyncSession
    get_session_token  → raw session cookie value (None if absent)
    require_identity   → authoritative identity or 401 (API handlers)

Page handlers do not use require_identity; they call the verifier
themselves and turn DenyRedirect into a redirect response.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.context import AppContext
from tracker.exceptions import AuthenticationError
from tracker.security.session_token import SessionIdentity


def get_context(request: Request) -> AppContext:
    return request.app.state.context


async def get_db_session(
    context: AppContext = Depends(get_context),
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a database session per request.

    Commits when the handler returns normally, rolls back when it raises.

    Example usage in a route:
        @router.get("/api/profile")
        async def get_profile(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with context.database.session() as session:
        yield session


def get_session_token(
    request: Request,
    context: AppContext = Depends(get_context),
) -> Optional[str]:
    return request.cookies.get(context.settings.session_cookie_name)


async def require_identity(
    token: Optional[str] = Depends(get_session_token),
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> SessionIdentity:
    """
    Authoritative check for API handlers.

    The edge gate lets every /api path through, so this is the only thing
    standing between an anonymous caller and user data.

    Raises:
        AuthenticationError: no valid session (→ 401 {"message": "Unauthorized"})
    """
    identity = await context.session_verifier.get_identity(db, token)
    if identity is None:
        raise AuthenticationError()
    return identity
