"""
Mounjaro Tracker Backend — Credential Endpoint Rate Limiting
==============================================================

What:  Per-IP sliding window limiter for the endpoints that take a password
       or send a reset link.
Why:   Slows down credential stuffing and reset-link spam. Ordinary page
       and API traffic is never limited.
How:   Timestamps per IP in memory; drop those older than the window,
       reject with 429 when the remainder reaches the limit.

Limited requests (POST only):
    /api/auth/login
    /api/auth/register
    /api/auth/forgot-password
    /api/auth/reset-password

Production Upgrade Path:
    In-memory state is per process. With several workers or instances the
    effective limit multiplies; move the counters to Redis at that point.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, FrozenSet, Iterable, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from tracker.exceptions import RateLimitExceededError
from tracker.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

CREDENTIAL_PATHS: FrozenSet[str] = frozenset(
    {
        "/api/auth/login",
        "/api/auth/register",
        "/api/auth/forgot-password",
        "/api/auth/reset-password",
    }
)

# Prune idle IPs every this many recorded attempts
CLEANUP_EVERY = 1000


class LoginRateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter for credential endpoints.

    Args:
        max_requests: attempts allowed per IP inside one window
        window_seconds: window length
        paths: POST paths to limit (defaults to CREDENTIAL_PATHS)

    Response on rate limit:
        429 with a Retry-After header and the usual error body.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_requests: int,
        window_seconds: int,
        paths: Iterable[str] = CREDENTIAL_PATHS,
    ):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.paths = frozenset(paths)
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._recorded = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method != "POST" or request.url.path not in self.paths:
            return await call_next(request)

        # Behind a proxy this is the proxy's address; configure
        # uvicorn --forwarded-allow-ips so request.client is the real peer
        client_ip = request.client.host if request.client else "unknown"

        now = time.time()
        window_start = now - self.window_seconds

        # ── Sliding window: drop expired entries ──────────────────────────
        attempts = [ts for ts in self._requests[client_ip] if ts > window_start]
        self._requests[client_ip] = attempts

        if len(attempts) >= self.max_requests:
            retry_after = int(attempts[0] + self.window_seconds - now) + 1
            logger.warning(
                "Credential rate limit exceeded for IP %s on %s: %d attempts in %ds",
                client_ip,
                request.url.path,
                len(attempts),
                self.window_seconds,
            )
            exc = RateLimitExceededError(retry_after=retry_after)
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": exc.message,
                    "details": {"retry_after": retry_after},
                    "request_id": request_id_var.get(""),
                },
                headers={"Retry-After": str(retry_after)},
            )

        attempts.append(now)
        self._recorded += 1
        if self._recorded % CLEANUP_EVERY == 0:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        """Forget IPs whose newest attempt is already outside the window."""
        inactive_ips = [
            ip
            for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]

        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
