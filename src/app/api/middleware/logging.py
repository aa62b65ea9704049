"""Structured request logging.

Every request gets an id (echoed back as ``X-Request-ID``) and two log lines,
one when it arrives and one when it finishes. Log output is JSON, and any
credential-like text (session ids, CSRF and remember tokens, card numbers,
email addresses, phone numbers) is masked before it is written.
"""

import json
import logging
import re
import time
import uuid
from typing import Any, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


# Patterns masked in every message and string field
PII_PATTERNS = [
    (re.compile(r'\b[0-9a-fA-F]{32,}\b'), '[TOKEN]'),
    (re.compile(r'\b\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{1,7}\b'), '[CARD]'),
    (re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b'), '[EMAIL]'),
    (re.compile(r'\+\d{1,3}[-.\s]?\(?\d{2,4}\)?[-.\s]?\d{3,4}[-.\s]?\d{4,5}'), '[PHONE]'),
]

# Record attributes (passed via ``extra=``) that end up in the JSON line
STRUCTURED_FIELDS = (
    "request_id",
    "user_id",
    "method",
    "path",
    "status_code",
    "duration_ms",
    "error_code",
    "error_type",
    "client_ip",
    "attempts",
    "reference",
    "card_id",
    "count",
)


def filter_pii(text: str) -> str:
    """Mask tokens, card numbers and contact details in ``text``."""
    if not text:
        return text

    for pattern, replacement in PII_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def _request_fields(request: Request) -> dict[str, Any]:
    session = getattr(request.state, "session", None)
    return {
        "request_id": getattr(request.state, "request_id", None),
        "user_id": session.user_id if session is not None else None,
        "method": request.method,
        "path": filter_pii(request.url.path),
    }


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log its outcome and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.request_id = str(uuid.uuid4())
        started = time.perf_counter()

        logger.info(
            "Request started",
            extra={
                **_request_fields(request),
                "client_ip": request.client.host if request.client else None,
            },
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed",
                extra={
                    **_request_fields(request),
                    "duration_ms": _elapsed_ms(started),
                    "error_type": type(exc).__name__,
                },
            )
            raise

        response.headers["X-Request-ID"] = request.state.request_id

        # user_id is only known once the session middleware has run
        logger.log(
            logging.WARNING if response.status_code >= 400 else logging.INFO,
            "Request completed",
            extra={
                **_request_fields(request),
                "status_code": response.status_code,
                "duration_ms": _elapsed_ms(started),
            },
        )
        return response


class JSONLogFormatter(logging.Formatter):
    """Render a log record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": filter_pii(record.getMessage()),
        }

        for field in STRUCTURED_FIELDS:
            value = getattr(record, field, None)
            if value is None:
                continue
            log_data[field] = filter_pii(value) if isinstance(value, str) else value

        if record.exc_info:
            log_data["exception"] = filter_pii(self.formatException(record.exc_info))

        return json.dumps(log_data, default=str)


def configure_logging(level: str = "INFO") -> None:
    """Send everything under the ``app`` logger through the JSON formatter."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONLogFormatter())

    app_logger = logging.getLogger("app")
    app_logger.handlers = [handler]
    app_logger.setLevel(level.upper())
    app_logger.propagate = False
