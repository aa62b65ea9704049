"""Pydantic schemas for authentication endpoints."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from app.core.validation import required_text, unwrap, validate_email, validate_password
from app.schemas.common import ApiModel


class UserRegister(ApiModel):
    """Request model for user registration."""

    email: str = Field(..., description="User email address")
    password: str = Field(..., description="Password (8+ chars, upper, lower, digit, symbol)")
    name: str = Field(..., description="Display name")

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, value: Any) -> str:
        return unwrap(validate_email(value))

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, value: Any) -> str:
        return unwrap(validate_password(value))

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value: Any) -> str:
        return unwrap(required_text("Name", 100)(value))


class LoginRequest(ApiModel):
    """Request model for user login."""

    email: str = Field(..., min_length=1, max_length=254, description="User email address")
    password: str = Field(..., min_length=1, description="User password")
    remember_me: bool = Field(default=False, description="Keep the session for 30 days")


class AutoLoginRequest(ApiModel):
    remember_token: str = Field(..., min_length=1, max_length=256, description="Token from a remember-me login")


class UserResponse(ApiModel):
    """User data (without sensitive fields)."""

    id: UUID
    email: str
    name: str
    created_at: datetime


class AuthResponse(ApiModel):
    """Response for register, login and auto-login."""

    message: str
    user: UserResponse
    csrf_token: str = Field(description="CSRF token of the new session")
    remember_token: str | None = Field(default=None, description="Present only when remember-me was requested")


class CurrentUser(ApiModel):
    user: UserResponse


class CsrfTokenResponse(ApiModel):
    csrf_token: str
