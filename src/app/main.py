import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from app.api.middleware.error_handler import (
    handle_app_error,
    handle_generic_error,
    handle_integrity_error,
    handle_validation_error,
)
from app.api.middleware.logging import RequestLoggingMiddleware, configure_logging
from app.api.middleware.rate_limit import RateLimitMiddleware
from app.api.middleware.session import CSRFMiddleware, SessionMiddleware
from app.api.routes import router as api_router
from app.api.routes.health import router as health_router
from app.config import Settings, settings
from app.core.exceptions import AppError
from app.core.store import (
    Clock,
    DatabaseKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
    utcnow,
)
from app.db.session import AsyncSessionLocal, create_tables
from app.services.session import SessionManager
from app.services.throttle import LoginThrottle

logger = logging.getLogger(__name__)


def build_store(app_settings: Settings, clock: Clock) -> KeyValueStore:
    """Select the shared-state backend named by ``state_backend``."""
    if app_settings.state_backend == "database":
        return DatabaseKeyValueStore(AsyncSessionLocal, clock=clock)
    return InMemoryKeyValueStore(clock=clock)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if app.state.settings.create_tables:
        await create_tables()
    if isinstance(app.state.store, DatabaseKeyValueStore):
        await app.state.store.purge_expired()
    logger.info(f"Application started ({app.state.settings.state_backend} state backend)")
    yield
    # Shutdown


def create_app(
    app_settings: Settings | None = None,
    store: KeyValueStore | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    app_settings = app_settings or settings
    clock = clock or utcnow
    store = store or build_store(app_settings, clock)

    configure_logging(app_settings.log_level)

    app = FastAPI(
        title="Personal Finance Dashboard API",
        description="Cards, transactions, transfers and spending analytics behind session authentication",
        version="0.1.0",
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.clock = clock
    app.state.store = store
    app.state.session_manager = SessionManager(
        store,
        ttl=timedelta(hours=app_settings.session_ttl_hours),
        remember_ttl=timedelta(days=app_settings.remember_ttl_days),
    )
    app.state.throttle = LoginThrottle(
        store,
        max_attempts=app_settings.login_max_attempts,
        lockout=timedelta(minutes=app_settings.login_lockout_minutes),
        clock=clock,
    )

    # Middleware runs in reverse order of registration: request logging is
    # outermost and CSRF validation sees the loaded session.
    app.add_middleware(CSRFMiddleware)
    app.add_middleware(SessionMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers (order matters - most specific first)
    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    # Register routers
    app.include_router(health_router)
    app.include_router(api_router)

    return app


app = create_app()
