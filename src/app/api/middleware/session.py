"""Session cookie and CSRF middleware.

``SessionMiddleware`` loads the server-side session named by the cookie (or
starts a new one), exposes it as ``request.state.session`` and persists it
after the handler runs. ``CSRFMiddleware`` rejects state-changing API calls
whose ``X-CSRF-Token`` header does not match the session token.
"""

import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.middleware.error_handler import error_response
from app.core.exceptions import InvalidCsrf
from app.services.session import CSRF_HEADER, validate_mutation

logger = logging.getLogger(__name__)

SESSION_PATH_PREFIX = "/api"


class SessionMiddleware(BaseHTTPMiddleware):
    """Attach a session to every API request and keep its cookie current."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not request.url.path.startswith(SESSION_PATH_PREFIX):
            return await call_next(request)

        settings = request.app.state.settings
        manager = request.app.state.session_manager

        session = await manager.load(request.cookies.get(settings.session_cookie_name))
        request.state.session = session

        response = await call_next(request)

        if session.destroyed:
            response.delete_cookie(settings.session_cookie_name, path="/")
            return response

        if not await manager.save(session):
            # Logged out or rotated elsewhere; keep whatever cookie that set
            return response

        response.set_cookie(
            settings.session_cookie_name,
            session.id,
            max_age=int(manager.lifetime(session).total_seconds()),
            path="/",
            httponly=True,
            samesite="strict",
            secure=settings.session_cookie_secure or request.url.scheme == "https",
        )
        return response


class CSRFMiddleware(BaseHTTPMiddleware):
    """Require the session's CSRF token on mutating API requests.

    Must run inside ``SessionMiddleware``.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        session = getattr(request.state, "session", None)
        if session is not None:
            try:
                validate_mutation(
                    request.method,
                    request.url.path,
                    request.headers.get(CSRF_HEADER),
                    session,
                )
            except InvalidCsrf as exc:
                return error_response(exc)
        return await call_next(request)
