import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

sys.path.append(str(Path(__file__).parents[1] / "src"))

from app.config import Settings
from app.core.store import InMemoryKeyValueStore
from app.db.session import get_db
from app.main import create_app
from app.models.base import Base

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

STRONG_PASSWORD = "SecurePass123!"


class FakeClock:
    """Settable clock; call it to read the current instant."""

    def __init__(self, now: datetime = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def engine():
    """Fresh in-memory database per test.

    StaticPool keeps every session on the same connection so all of them see
    the same in-memory database.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    """Provide test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, rate_limit_enabled=False, create_tables=False)


@pytest.fixture
def store(clock) -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore(clock=clock)


@pytest.fixture
def app(test_settings, store, clock, session_factory):
    """Application wired to the test database, store and clock."""
    app = create_app(app_settings=test_settings, store=store, clock=clock)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    """Provide an HTTP client with its own cookie jar."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register_user(client: AsyncClient):
    """Register a user and send the returned CSRF token on later requests."""

    async def _register(
        email: str = "user@example.com",
        password: str = STRONG_PASSWORD,
        name: str = "Test User",
    ) -> dict:
        response = await client.post(
            "/api/register",
            json={"email": email, "password": password, "name": name},
        )
        assert response.status_code == 201, response.text
        data = response.json()
        client.headers["X-CSRF-Token"] = data["csrfToken"]
        return data

    return _register


@pytest.fixture
async def auth_client(client: AsyncClient, register_user) -> AsyncClient:
    """Client signed in as a freshly registered user."""
    await register_user()
    return client


@pytest.fixture
async def card_id(auth_client: AsyncClient) -> str:
    """Id of a card with a 1000.00 opening balance."""
    response = await auth_client.post(
        "/api/cards",
        json={
            "holderName": "Test User",
            "lastFour": "4242",
            "expiry": "12/27",
            "balance": 1000,
            "currency": "USD",
            "brand": "visa",
        },
    )
    assert response.status_code == 200, response.text
    return response.json()["id"]
