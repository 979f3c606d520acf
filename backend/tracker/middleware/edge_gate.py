"""
Mounjaro Tracker Backend — Edge Gate Middleware
=================================================

What:  Cheap, stateless triage of page requests before any handler runs.
Why:   Signed-out visitors should bounce to /login immediately and signed-in
       users should skip the login form, without paying for a database
       round trip on every page view.
How:   Decode the session cookie optimistically (OptimisticSessionReader)
       and apply a pure decision function to (path, has_session).

IMPORTANT: this gate is UX, not security.
    It never reads the data store and its decisions are advisory. A request
    that slips past it (CVE-2025-29927 style header tricks, a token for a
    deleted user) still meets the AuthoritativeSessionVerifier inside the
    handler. API routes pass straight through and answer 401 themselves.

Decision table (first match wins):
    excluded asset / offline page     → pass
    /api...                           → pass
    auth-only  + session              → 307 /summary
    protected  + no session           → 307 /login?callbackUrl=<path>
    "/"        + session              → 307 /summary
    anything else                     → pass

A malformed or expired token is indistinguishable from no token.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from tracker.security.optimistic import OptimisticSessionReader
from tracker.security.route_table import (
    LANDING_PATH,
    LOGIN_PATH,
    ROOT_PATH,
    RouteClass,
    RouteTable,
)

logger = logging.getLogger(__name__)

CALLBACK_PARAM = "callbackUrl"


@dataclass(frozen=True)
class GateDecision:
    """Pass-through when redirect_to is None, otherwise a redirect target."""

    redirect_to: Optional[str] = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect_to is not None


PASS_THROUGH = GateDecision()


def login_redirect_target(path: str) -> str:
    return f"{LOGIN_PATH}?{urlencode({CALLBACK_PARAM: path})}"


class EdgeGate:
    """Pure decision logic; no I/O, same inputs always give the same answer."""

    def __init__(self, route_table: RouteTable):
        self.route_table = route_table

    def decide(self, path: str, has_session: bool) -> GateDecision:
        if self.route_table.is_excluded(path):
            return PASS_THROUGH

        route_class = self.route_table.classify(path)

        if route_class is RouteClass.API:
            return PASS_THROUGH

        if route_class is RouteClass.AUTH_ONLY and has_session:
            return GateDecision(LANDING_PATH)

        if route_class is RouteClass.PROTECTED and not has_session:
            return GateDecision(login_redirect_target(path))

        if path == ROOT_PATH and has_session:
            return GateDecision(LANDING_PATH)

        return PASS_THROUGH


class EdgeGateMiddleware(BaseHTTPMiddleware):
    """
    Starlette adapter around EdgeGate.

    The gate, reader and cookie name come from AppContext and are passed in
    by create_app(); the middleware holds no per-request state.
    """

    def __init__(
        self,
        app: ASGIApp,
        gate: EdgeGate,
        reader: OptimisticSessionReader,
        cookie_name: str,
    ):
        super().__init__(app)
        self.gate = gate
        self.reader = reader
        self.cookie_name = cookie_name

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path

        # Assets and API calls never need the cookie decoded
        if self.gate.route_table.is_excluded(path) or (
            self.gate.route_table.classify(path) is RouteClass.API
        ):
            return await call_next(request)

        has_session = self.reader.has_session(request.cookies.get(self.cookie_name))
        decision = self.gate.decide(path, has_session)

        if decision.is_redirect:
            logger.debug("Edge gate redirect %s -> %s", path, decision.redirect_to)
            return RedirectResponse(decision.redirect_to, status_code=307)

        return await call_next(request)
