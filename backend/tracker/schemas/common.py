"""
Mounjaro Tracker Backend — Shared Response Schemas
====================================================

What:  Response models used across route modules: errors, plain messages,
       health, and the JSON page placeholders.
Why:   Clients need one consistent error structure to parse programmatically.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "unauthorized",
            "message": "Invalid email or password",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. after logout or a reset request."""
    message: str


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


class PageResponse(BaseModel):
    """
    JSON stand-in for a server-rendered page.

    Rendering is handled by the frontend; these endpoints exist so every
    page path goes through the same authoritative session checks.
    """
    page: str = Field(description="Page name, e.g. 'summary'")
    user_id: Optional[uuid.UUID] = Field(default=None, description="Signed-in user, if any")
    email: Optional[str] = Field(default=None)
