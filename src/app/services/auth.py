"""Authentication service with business logic."""

import logging
from dataclasses import dataclass

from app.core.exceptions import DuplicateEmail, InvalidCredentials, Unauthorized
from app.core.security import hash_password, verify_password
from app.models.user import User
from app.repositories.user import UserRepository
from app.services.remember import RememberTokenService
from app.services.session import Session, SessionManager
from app.services.throttle import LoginThrottle

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """Outcome of a successful authentication."""

    user: User
    csrf_token: str
    remember_token: str | None = None


class AuthService:
    """Service for authentication operations."""

    def __init__(
        self,
        user_repo: UserRepository,
        sessions: SessionManager,
        throttle: LoginThrottle,
        remember_tokens: RememberTokenService,
    ):
        """
        Initialize authentication service.

        Args:
            user_repo: User repository for database operations
            sessions: Session manager for the current store
            throttle: Failed-login tracker
            remember_tokens: Remember-me token issuer
        """
        self.user_repo = user_repo
        self.sessions = sessions
        self.throttle = throttle
        self.remember_tokens = remember_tokens

    async def register(self, email: str, password: str, name: str, session: Session) -> AuthResult:
        """
        Register a new user and sign them in.

        Args:
            email: Normalized email address
            password: Plain text password (already policy-checked)
            name: Display name
            session: Current request session

        Returns:
            The created user and the rotated session's CSRF token

        Raises:
            DuplicateEmail: If email already exists
        """
        if await self.user_repo.email_exists(email):
            raise DuplicateEmail("Email already registered")

        user = await self.user_repo.create(
            User(email=email, password_hash=hash_password(password), name=name)
        )
        csrf_token = self.sessions.login(session, user.id)
        logger.info("User registered", extra={"user_id": str(user.id)})
        return AuthResult(user=user, csrf_token=csrf_token)

    async def login(
        self,
        email: str,
        password: str,
        session: Session,
        origin: str | None,
        remember_me: bool = False,
    ) -> AuthResult:
        """
        Authenticate with email and password.

        Args:
            email: User email address
            password: Plain text password
            session: Current request session (regenerated on success)
            origin: Client address, used to scope the failed-attempt counter
            remember_me: Issue a remember token and extend the session to 30 days

        Returns:
            User, new CSRF token and the remember token (if requested)

        Raises:
            TooManyAttempts: If this (email, origin) pair is locked out
            InvalidCredentials: If email or password is wrong
        """
        await self.throttle.ensure_allowed(email, origin)

        user = await self.user_repo.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            attempts = await self.throttle.record_failure(email, origin)
            logger.warning(
                "Failed login attempt",
                extra={"client_ip": origin, "attempts": attempts},
            )
            raise InvalidCredentials("Invalid email or password")

        await self.throttle.clear(email, origin)

        csrf_token = self.sessions.login(session, user.id, remember=remember_me)
        remember_token = None
        if remember_me:
            remember_token = await self.remember_tokens.issue(user.id)

        logger.info("User logged in", extra={"user_id": str(user.id)})
        return AuthResult(user=user, csrf_token=csrf_token, remember_token=remember_token)

    async def auto_login(self, token: str, session: Session) -> AuthResult:
        """
        Re-establish a session from a remember token.

        Raises:
            InvalidToken: Unknown or superseded token
            TokenExpired: Token past its expiry
        """
        user = await self.remember_tokens.redeem(token)
        csrf_token = self.sessions.login(session, user.id, remember=True)
        logger.info("Auto-login via remember token", extra={"user_id": str(user.id)})
        return AuthResult(user=user, csrf_token=csrf_token)

    async def logout(self, session: Session) -> None:
        user_id = session.user_id
        await self.sessions.destroy(session)
        if user_id:
            logger.info("User logged out", extra={"user_id": user_id})

    async def get_current_user(self, session: Session) -> User:
        """
        Get the user bound to the session.

        Raises:
            Unauthorized: If the session is anonymous or the user no longer exists
        """
        user_id = session.authenticated_user_id
        if user_id is None:
            raise Unauthorized()

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise Unauthorized()
        return user
