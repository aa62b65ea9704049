"""Fixed-window request rate limiting per client IP."""

import logging
from datetime import timedelta
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.middleware.error_handler import error_response
from app.core.exceptions import TooManyAttempts

logger = logging.getLogger(__name__)

RATE_LIMIT_KEY_PREFIX = "rate-limit:"
API_PREFIX = "/api/"
AUTH_PATHS = frozenset({"/api/login", "/api/register"})


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Cap API requests per client IP within a fixed window.

    Every ``/api/`` request counts against the general budget; login and
    registration also count against the smaller auth budget.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        settings = request.app.state.settings
        path = request.url.path
        if not settings.rate_limit_enabled or not path.startswith(API_PREFIX):
            return await call_next(request)

        store = request.app.state.store
        client_ip = request.client.host if request.client else "unknown"
        window = timedelta(seconds=settings.rate_limit_window_seconds)

        budgets = [("api", settings.rate_limit_requests)]
        if path in AUTH_PATHS:
            budgets.append(("auth", settings.auth_rate_limit_requests))

        for scope, limit in budgets:
            count = await store.increment(f"{RATE_LIMIT_KEY_PREFIX}{scope}:{client_ip}", ttl=window)
            if count > limit:
                logger.warning(
                    "Rate limit exceeded",
                    extra={"client_ip": client_ip, "path": path, "count": count},
                )
                return error_response(
                    TooManyAttempts(
                        retry_after=window.total_seconds(),
                        message="Too many requests, please try again later.",
                    )
                )

        return await call_next(request)
