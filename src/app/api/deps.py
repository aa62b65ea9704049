"""FastAPI dependency injection for sessions, services and database."""

from datetime import timedelta

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.core.store import Clock
from app.db.session import get_db
from app.models.user import User
from app.repositories.remember_token import RememberTokenRepository
from app.repositories.user import UserRepository
from app.services.auth import AuthService
from app.services.ledger import LedgerService
from app.services.remember import RememberTokenService
from app.services.session import Session, SessionManager
from app.services.throttle import LoginThrottle


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_session(request: Request) -> Session:
    """The session attached by ``SessionMiddleware``."""
    return request.state.session


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_throttle(request: Request) -> LoginThrottle:
    return request.app.state.throttle


async def get_user_repository(
    db: AsyncSession = Depends(get_db),
) -> UserRepository:
    """
    Get user repository instance.

    Args:
        db: Database session

    Returns:
        UserRepository instance
    """
    return UserRepository(db)


async def get_remember_service(
    db: AsyncSession = Depends(get_db),
    user_repo: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_settings),
    clock: Clock = Depends(get_clock),
) -> RememberTokenService:
    return RememberTokenService(
        RememberTokenRepository(db),
        user_repo,
        lifetime=timedelta(days=settings.remember_ttl_days),
        clock=clock,
    )


async def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    sessions: SessionManager = Depends(get_session_manager),
    throttle: LoginThrottle = Depends(get_throttle),
    remember_tokens: RememberTokenService = Depends(get_remember_service),
) -> AuthService:
    """
    Get authentication service instance.

    Args:
        user_repo: User repository
        sessions: Session manager
        throttle: Failed-login tracker
        remember_tokens: Remember-me token issuer

    Returns:
        AuthService instance
    """
    return AuthService(user_repo, sessions, throttle, remember_tokens)


async def get_current_user(
    session: Session = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Resolve the authenticated user for this request.

    Raises:
        Unauthorized: If the session is anonymous or the user is gone
    """
    return await auth_service.get_current_user(session)


async def get_ledger_service(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> LedgerService:
    return LedgerService(db, clock=clock)
