"""Custom exception classes for the dashboard API.

Every exception carries an error_code that maps to the error catalog in
errors.py and the HTTP status the API layer responds with.
"""

import math
from typing import Any


class AppError(Exception):
    """Base exception for all application errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "AUTH_001")
        message: Human-readable message returned to the client
        details: Additional context about the error (for logging only)
        http_status: HTTP status code to return
    """

    error_code = "SYS_001"
    http_status = 500

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        error_code: str | None = None,
        http_status: int | None = None,
    ):
        """Initialize the exception.

        Args:
            message: Client-facing message (falls back to the catalog text)
            details: Additional error context (not shown to users)
            error_code: Overrides the class-level error code
            http_status: Overrides the class-level HTTP status
        """
        if error_code is not None:
            self.error_code = error_code
        if http_status is not None:
            self.http_status = http_status
        self.message = message
        self.details = details or {}
        super().__init__(message or self.error_code)


class ValidationError(AppError):
    """Malformed or out-of-range input. User-correctable."""

    error_code = "VAL_001"
    http_status = 400


class DuplicateEmail(ValidationError):
    """Registration with an email that already has an account."""

    error_code = "AUTH_005"


class Unauthorized(AppError):
    """No session, or the session is not authenticated."""

    error_code = "AUTH_001"
    http_status = 401


class InvalidCredentials(Unauthorized):
    """Bad password or unknown email.

    Both cases share one message so the response does not reveal
    whether an account exists.
    """

    error_code = "AUTH_002"


class InvalidToken(Unauthorized):
    """Remember token is unknown or was superseded."""

    error_code = "AUTH_003"


class TokenExpired(Unauthorized):
    """Remember token is past its expiry."""

    error_code = "AUTH_004"


class InvalidCsrf(AppError):
    """Mutating request without the session's CSRF token."""

    error_code = "SEC_001"
    http_status = 403


class TooManyAttempts(AppError):
    """Login lockout or API rate limit exceeded."""

    error_code = "SEC_002"
    http_status = 429

    def __init__(self, retry_after: float, message: str | None = None, **kwargs: Any):
        self.retry_after = max(1, math.ceil(retry_after))
        super().__init__(message, **kwargs)


class NotFound(AppError):
    """Requested resource does not exist or belongs to another user."""

    error_code = "API_404"
    http_status = 404


class InternalError(AppError):
    """Persistence or unexpected failure. Details stay server-side."""

    error_code = "SYS_001"
    http_status = 500
