"""
Mounjaro Tracker Backend — Authentication Schemas
===================================================

What:  Request/response models for /api/auth/*.

Validation split:
    Structural checks (JSON shape, email syntax) happen here and produce
    FastAPI's 422. Business rules (password strength, duplicate email,
    reset token validity) live in the services and produce 400/409.

Login deliberately takes a plain string email: a malformed email is just
another failed login ("Invalid email or password"), not a schema error
that would behave differently from an unknown address.
"""

import uuid

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    email: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=1024)


class RegisterRequest(BaseModel):
    email: EmailStr = Field(description="Login email; stored lowercased")
    password: str = Field(max_length=1024, description="Min 8 chars, upper, lower and digit")


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1, max_length=255)
    password: str = Field(max_length=1024)


class UserResponse(BaseModel):
    """Public view of an account. Never includes the password hash."""
    id: uuid.UUID
    email: str

    model_config = {"from_attributes": True}


class SessionResponse(BaseModel):
    """Returned by login and GET /api/auth/session."""
    user: UserResponse


class RegisterResponse(BaseModel):
    message: str = "Account created successfully"
    user: UserResponse
