"""
Mounjaro Tracker Backend — Request ID Middleware
==================================================

What:  Assigns a short correlation ID to each request and echoes it back.
Why:   Every log line of one request (access log, verifier, services)
       shares the ID, and error responses carry it for support.
How:   Reuse a client-sent X-Request-ID or generate one, store it in a
       ContextVar and on request.state, return it in the response header.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# ── Context Variable ──────────────────────────────────────────────────────
# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Accepts the client's X-Request-ID when present, else an 8-char UUID prefix."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
