"""Exception handlers producing the API's JSON error body.

Every failure leaves the service as::

    {"error_code", "message", "user_message", "suggestion", "retry_allowed"}

with the text taken from ``app.core.errors.ERROR_CATALOG``. Internal details
(SQL, tracebacks, exception text) are only logged when ``debug`` is on.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from app.core.errors import get_error, get_user_message
from app.core.exceptions import AppError, TooManyAttempts

logger = logging.getLogger(__name__)


def _catalog_body(error_code: str, message: str | None = None) -> dict:
    error_info = get_error(error_code)
    return {
        "error_code": error_code,
        "message": message or error_info["message"],
        "user_message": message or get_user_message(error_code),
        "suggestion": error_info["suggestion"],
        "retry_allowed": error_info["retry_allowed"],
    }


def _request_extra(request: Request) -> dict:
    return {"path": request.url.path, "method": request.method}


def _debug(request: Request) -> bool:
    return request.app.state.settings.debug


def error_response(exc: AppError) -> JSONResponse:
    """Build the JSON error response for an application exception.

    Middleware calls this directly, since exceptions raised there never
    reach FastAPI's handlers.
    """
    content = _catalog_body(exc.error_code, exc.message)
    headers = None
    if isinstance(exc, TooManyAttempts):
        content["retry_after"] = exc.retry_after
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(status_code=exc.http_status, content=content, headers=headers)


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    """Map an ``AppError`` to its status code and catalog entry."""
    extra = {"error_code": exc.error_code, **_request_extra(request)}
    if _debug(request):
        extra["details"] = exc.details

    if exc.http_status >= 500:
        logger.error(f"Request failed: {exc.error_code}", extra=extra)
    else:
        logger.info(f"Request rejected: {exc.error_code}", extra=extra)

    return error_response(exc)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed input as ``400 VAL_001``.

    The message lists each failing field as ``field: reason``, joined by
    ``" | "``.
    """
    errors = exc.errors()
    messages = []
    for error in errors:
        field = ".".join(str(part) for part in error.get("loc", []) if part != "body")
        reason = error.get("msg", "Invalid value").removeprefix("Value error, ")
        messages.append(f"{field}: {reason}" if field else reason)

    extra = _request_extra(request)
    if _debug(request):
        extra["errors"] = errors
    logger.warning(f"Validation error on {request.url.path}", extra=extra)

    content = _catalog_body("VAL_001")
    content["message"] = " | ".join(messages)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


async def handle_integrity_error(
    request: Request, exc: IntegrityError
) -> JSONResponse:
    """Turn constraint violations into 409 (duplicates) or 500."""
    # str(exc) carries SQL and bound parameters
    log = logger.exception if _debug(request) else logger.error
    log(f"Database integrity error on {request.url.path}", extra=_request_extra(request))

    error_msg = str(exc.orig).lower()
    if "unique" in error_msg or "duplicate" in error_msg:
        code, http_status = "DB_002", status.HTTP_409_CONFLICT
    else:
        code, http_status = "DB_001", status.HTTP_500_INTERNAL_SERVER_ERROR

    return JSONResponse(status_code=http_status, content=_catalog_body(code))


async def handle_generic_error(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log the failure and answer ``500 SYS_001``."""
    extra = {"error_type": type(exc).__name__, **_request_extra(request)}
    log = logger.exception if _debug(request) else logger.error
    log(f"Unexpected error on {request.url.path}", extra=extra)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_catalog_body("SYS_001"),
    )
