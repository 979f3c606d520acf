"""
Mounjaro Tracker Backend — Custom Exception Hierarchy
=======================================================

What:  Application-specific exceptions for the different error scenarios.
Why:   Targeted handling with the right HTTP status and a user-safe message,
       instead of generic exceptions that would leak internal details.
How:   Each exception carries a message and an optional context dict.
       Global handlers (registered in main.py) turn them into JSON responses.
Who:   Raised by services, dependencies and the token codec.

Exception Hierarchy:
    TrackerError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    ├── RateLimitExceededError   → 429 Too Many Requests
    ├── DatabaseError            → 500 Internal Server Error
    └── SessionTokenError        → never rendered; readers map it to "no session"

Note on redirects:
    Failing the authoritative session check is NOT an exception here. The
    verifier returns a DenyRedirect value that page handlers must act on
    (see tracker.security.verifier). API handlers convert a missing identity
    into AuthenticationError instead.
"""

from typing import Any, Dict, Optional


class TrackerError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TrackerError):
    """
    Raised when client input fails a business rule.

    When:    Weak password on registration/reset, invalid or expired reset token.
    HTTP:    400 Bad Request

    Schema-level problems (wrong JSON types, missing fields) are still
    answered by FastAPI with 422.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(TrackerError):
    """
    Raised when a request needs an identity it does not have.

    When:    API call without a valid session; login with bad credentials.
    HTTP:    401 Unauthorized

    The message is deliberately generic. For login it is always
    "Invalid email or password" whether the email exists or not.
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TrackerError):
    """
    Raised when a requested resource does not exist.

    When:    GET /api/profile before onboarding; deleting an unknown push endpoint.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(TrackerError):
    """
    Raised when a create would violate a uniqueness rule.

    When:    Registering an email that already has an account; completing
             onboarding twice.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(TrackerError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. SQL, constraint
        names and driver errors are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(TrackerError):
    """
    Raised when a client exceeds the per-IP credential endpoint limit.

    HTTP:    429 Too Many Requests (with Retry-After)
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class SessionTokenError(TrackerError):
    """
    Raised by the token codec when a session token cannot be trusted.

    When:    Bad encryption, bad signature, expired, missing claims.
    HTTP:    Never surfaced. Both session readers catch it and treat the
             request as having no session at all.
    """

    def __init__(
        self,
        message: str = "Invalid session token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
