"""Server-side sessions and CSRF protection.

Sessions live in the shared KeyValueStore under ``session:<id>``. The cookie
carries only the opaque id. Each session holds the authenticated user id (if
any) and its CSRF token.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any
from uuid import UUID

from app.core.exceptions import InvalidCsrf
from app.core.security import generate_csrf_token, generate_session_id, tokens_match
from app.core.store import KeyValueStore

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = "session:"
CSRF_HEADER = "X-CSRF-Token"
MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
PROTECTED_PREFIX = "/api/"
# Pre-authentication routes: a first-time client has no session token yet.
CSRF_EXEMPT_PATHS = frozenset({"/api/register", "/api/login", "/api/auto-login"})


@dataclass
class Session:
    """Request-scoped view of a stored session."""

    id: str
    csrf_token: str | None = None
    user_id: str | None = None
    remember: bool = False
    is_new: bool = False
    # Old id to discard when the session was regenerated during this request.
    replaced_id: str | None = None
    destroyed: bool = False
    # Stored value this request started from; None when the id is not stored yet.
    loaded: dict[str, Any] | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def authenticated_user_id(self) -> UUID | None:
        return UUID(self.user_id) if self.user_id else None

    def to_store(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "csrf_token": self.csrf_token,
            "remember": self.remember,
        }


class SessionManager:
    """Creates, loads, rotates and destroys sessions."""

    def __init__(
        self,
        store: KeyValueStore,
        ttl: timedelta = timedelta(hours=24),
        remember_ttl: timedelta = timedelta(days=30),
    ):
        self.store = store
        self.ttl = ttl
        self.remember_ttl = remember_ttl

    def lifetime(self, session: Session) -> timedelta:
        """Inactivity window for this session."""
        return self.remember_ttl if session.remember else self.ttl

    def create(self) -> Session:
        session = Session(id=generate_session_id(), is_new=True)
        self.issue_token(session)
        return session

    async def load(self, session_id: str | None) -> Session:
        """Load the session for a cookie value, or start a new one."""
        if session_id:
            data = await self.store.get(SESSION_KEY_PREFIX + session_id)
            if data is not None:
                session = Session(
                    id=session_id,
                    csrf_token=data.get("csrf_token"),
                    user_id=data.get("user_id"),
                    remember=bool(data.get("remember")),
                    loaded=data,
                )
                self.issue_token(session)
                return session
        return self.create()

    async def save(self, session: Session) -> bool:
        """Persist the session, refreshing its inactivity window.

        The write is a compare-and-set against the value loaded at the start
        of the request. Returns False, leaving the store untouched, when
        another request changed or destroyed the session in the meantime.
        """
        if session.replaced_id:
            await self.store.delete(SESSION_KEY_PREFIX + session.replaced_id)
            session.replaced_id = None

        data = session.to_store()
        saved = await self.store.compare_and_set(
            SESSION_KEY_PREFIX + session.id, session.loaded, data, ttl=self.lifetime(session)
        )
        if not saved:
            logger.info("Session changed by a concurrent request; update dropped")
            return False
        session.loaded = data
        return True

    def issue_token(self, session: Session) -> str:
        """Return the session's CSRF token, generating one on first use."""
        if not session.csrf_token:
            session.csrf_token = generate_csrf_token()
        return session.csrf_token

    def regenerate(self, session: Session) -> str:
        """Move the session to a fresh id with a fresh CSRF token.

        Called on every successful login so an id planted before
        authentication is useless afterwards. Returns the new id.
        """
        if session.replaced_id is None and not session.is_new:
            session.replaced_id = session.id
        session.id = generate_session_id()
        session.loaded = None
        session.csrf_token = generate_csrf_token()
        session.user_id = None
        session.remember = False
        return session.id

    def login(self, session: Session, user_id: UUID, remember: bool = False) -> str:
        """Regenerate and bind the session to a user. Returns the new CSRF token."""
        self.regenerate(session)
        session.user_id = str(user_id)
        session.remember = remember
        return session.csrf_token

    async def destroy(self, session: Session) -> None:
        await self.store.delete(SESSION_KEY_PREFIX + session.id)
        if session.replaced_id:
            await self.store.delete(SESSION_KEY_PREFIX + session.replaced_id)
        session.destroyed = True
        session.user_id = None


def requires_csrf(method: str, path: str) -> bool:
    """Whether a request must carry the session's CSRF token."""
    return (
        method.upper() in MUTATING_METHODS
        and path.startswith(PROTECTED_PREFIX)
        and path not in CSRF_EXEMPT_PATHS
    )


def validate_mutation(method: str, path: str, header_token: str | None, session: Session) -> None:
    """Reject state-changing API requests whose CSRF header does not match.

    Raises:
        InvalidCsrf: If the header is missing or differs from the session token
    """
    if not requires_csrf(method, path):
        return
    if not tokens_match(header_token, session.csrf_token):
        logger.warning(
            "CSRF validation failed",
            extra={"method": method, "path": path, "header_present": bool(header_token)},
        )
        raise InvalidCsrf()
