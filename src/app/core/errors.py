"""Error codes and user-friendly messages.

Each error has:
- code: Unique identifier
- message: Technical description (for logs and API clients)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the request can be retried as-is
"""

ERROR_CATALOG: dict[str, dict] = {
    "VAL_001": {
        "code": "VAL_001",
        "message": "Request data failed validation",
        "user_message": "Invalid input data",
        "suggestion": "Please check your input and try again.",
        "retry_allowed": True,
    },
    "AUTH_001": {
        "code": "AUTH_001",
        "message": "Authentication required",
        "user_message": "Unauthorized. Please login.",
        "suggestion": "Sign in and try again.",
        "retry_allowed": False,
    },
    "AUTH_002": {
        "code": "AUTH_002",
        "message": "Invalid credentials",
        "user_message": "Invalid email or password",
        "suggestion": "Check your email and password and try again.",
        "retry_allowed": True,
    },
    "AUTH_003": {
        "code": "AUTH_003",
        "message": "Remember token not recognized",
        "user_message": "Invalid or expired token",
        "suggestion": "Please sign in with your email and password.",
        "retry_allowed": False,
    },
    "AUTH_004": {
        "code": "AUTH_004",
        "message": "Remember token expired",
        "user_message": "Token expired",
        "suggestion": "Please sign in with your email and password.",
        "retry_allowed": False,
    },
    "AUTH_005": {
        "code": "AUTH_005",
        "message": "Email already registered",
        "user_message": "Email already registered",
        "suggestion": "Sign in instead, or register with a different email.",
        "retry_allowed": False,
    },
    "SEC_001": {
        "code": "SEC_001",
        "message": "Invalid or missing CSRF token",
        "user_message": "Invalid or missing CSRF token",
        "suggestion": "Reload the page and try again.",
        "retry_allowed": True,
    },
    "SEC_002": {
        "code": "SEC_002",
        "message": "Too many requests",
        "user_message": "Too many requests. Please try again later.",
        "suggestion": "Wait a few minutes before trying again.",
        "retry_allowed": True,
    },
    "API_404": {
        "code": "API_404",
        "message": "Resource not found",
        "user_message": "We couldn't find what you were looking for.",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    "DB_001": {
        "code": "DB_001",
        "message": "Database operation failed",
        "user_message": "A database error occurred",
        "suggestion": "Please try again later.",
        "retry_allowed": True,
    },
    "DB_002": {
        "code": "DB_002",
        "message": "Resource already exists",
        "user_message": "This record already exists",
        "suggestion": "Please check if the record was already created.",
        "retry_allowed": False,
    },
    "SYS_001": {
        "code": "SYS_001",
        "message": "Internal server error",
        "user_message": "An unexpected error occurred",
        "suggestion": "Please try again later or contact support.",
        "retry_allowed": True,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details; a generic entry for unknown codes
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def get_user_message(error_code: str) -> str:
    """Get user-friendly message for an error code."""
    return get_error(error_code)["user_message"]
