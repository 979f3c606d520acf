"""
Mounjaro Tracker Backend — Route Classification Table
=======================================================

What:  Static partition of URL path prefixes into access-control classes.
Why:   The edge gate needs a cheap, data-free way to decide whether a path
       is for signed-in users, signed-out users, the API, or anyone.
How:   Ordered prefix matching. API first, then auth-only, then protected.

Evaluation order matters:
    "/login".startswith("/log") is True, so a naive protected-first check
    would treat the login page as the protected log hub and bounce
    signed-out users into a redirect loop. Auth-only prefixes are therefore
    matched BEFORE protected ones, and a path gets exactly one class.

Excluded paths:
    Static assets, the favicon, images and the offline fallback page never
    reach the classifier at all (is_excluded). They must load for signed-out
    visitors and must not pay for a token decode.
"""

import enum
import re
from dataclasses import dataclass, field
from typing import Pattern, Tuple

PROTECTED_PREFIXES: Tuple[str, ...] = (
    "/summary",
    "/results",
    "/jabs",
    "/calendar",
    "/settings",
    "/log",
    "/weight",
    "/onboarding",
)

AUTH_ONLY_PREFIXES: Tuple[str, ...] = (
    "/login",
    "/register",
    "/forgot-password",
    "/reset-password",
)

API_PREFIX = "/api"

LOGIN_PATH = "/login"
LANDING_PATH = "/summary"
ONBOARDING_PATH = "/onboarding"
ROOT_PATH = "/"

# static files, favicon, common image extensions, offline fallback page
EXCLUDED_PATTERN: Pattern[str] = re.compile(
    r"^/(?:static/|favicon\.ico$|~offline)"
    r"|\.(?:svg|png|jpg|jpeg|gif|webp|ico)$",
    re.IGNORECASE,
)


class RouteClass(str, enum.Enum):
    """Access-control class of a request path."""

    API = "api"
    AUTH_ONLY = "auth_only"
    PROTECTED = "protected"
    PUBLIC = "public"


@dataclass(frozen=True)
class RouteTable:
    """
    Immutable route classification table.

    The defaults are the application's real route layout; tests may build
    a table with other prefixes.
    """

    protected: Tuple[str, ...] = PROTECTED_PREFIXES
    auth_only: Tuple[str, ...] = AUTH_ONLY_PREFIXES
    api_prefix: str = API_PREFIX
    excluded: Pattern[str] = field(default=EXCLUDED_PATTERN)

    def is_excluded(self, path: str) -> bool:
        """True for paths the edge gate never inspects (assets, offline page)."""
        return bool(self.excluded.search(path))

    def classify(self, path: str) -> RouteClass:
        """
        Return the single class of `path`.

        Order: API → AUTH_ONLY → PROTECTED → PUBLIC.
        """
        if path.startswith(self.api_prefix):
            return RouteClass.API
        if any(path.startswith(prefix) for prefix in self.auth_only):
            return RouteClass.AUTH_ONLY
        if any(path.startswith(prefix) for prefix in self.protected):
            return RouteClass.PROTECTED
        return RouteClass.PUBLIC
