"""
Pytest fixtures for the voting backend tests.

Every test gets its own application and SQLite file under tmp_path, built
from explicit Settings rather than the process environment.
"""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

# Set test environment variables before importing app
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing")
os.environ.setdefault("STAFF_PASS", "test-staff-pass")
os.environ.setdefault("IP_SALT", "test-ip-salt")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from core.config import Settings  # noqa: E402
from core.context import AppContext  # noqa: E402
from db.session import close_db, init_db  # noqa: E402
from models import Artist, Vote  # noqa: E402

STAFF_PASSWORD = "test-staff-pass"
TEST_SALT = "test-ip-salt"

VOTER_A = "203.0.113.10"
VOTER_B = "198.51.100.20"


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 10, 31, 20, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: float) -> None:
        self.now = self.now + timedelta(minutes=minutes)


@pytest.fixture
def make_settings(tmp_path: Any) -> Callable[..., Settings]:
    """Build Settings pointing at a temporary SQLite file."""

    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "SECRET_KEY": "test-secret-key-for-testing",
            "STAFF_PASS": STAFF_PASSWORD,
            "IP_SALT": TEST_SALT,
            "APP_ENV": "test",
            "DATABASE_URL": f"sqlite+aiosqlite:///{tmp_path / 'votes.sqlite'}",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings: Callable[..., Settings]) -> Settings:
    """Default settings: unlimited-once voting, cookie guard off."""
    return make_settings()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def context(settings: Settings) -> AsyncGenerator[AppContext, None]:
    """Initialized storage for service and repository tests."""
    ctx = AppContext.from_settings(settings)
    await init_db(ctx.engine)
    yield ctx
    await close_db(ctx.engine)


@pytest.fixture
async def db_session(context: AppContext) -> AsyncGenerator[Any, None]:
    async with context.session_maker() as session:
        yield session


@pytest.fixture
def count_votes(context: AppContext) -> Callable[[int], Awaitable[int]]:
    """Count committed votes for an artist from a fresh session."""

    async def _count(artist_id: int) -> int:
        async with context.session_maker() as session:
            result = await session.execute(
                select(func.count(Vote.id)).where(Vote.artist_id == artist_id)
            )
            return result.scalar_one()

    return _count


@pytest.fixture
def count_artists(context: AppContext) -> Callable[[], Awaitable[int]]:
    """Count committed artists from a fresh session."""

    async def _count() -> int:
        async with context.session_maker() as session:
            result = await session.execute(select(func.count(Artist.id)))
            return result.scalar_one()

    return _count


@pytest.fixture
async def app(settings: Settings, clock: FakeClock) -> AsyncGenerator[Any, None]:
    """Create the FastAPI application and run its lifespan."""
    from api.deps import get_clock
    from main import create_application

    application = create_application(settings)
    application.dependency_overrides[get_clock] = lambda: clock
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app: Any) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def staff_client(client: AsyncClient) -> AsyncClient:
    """The same client, logged in as staff."""
    response = await client.post("/api/staff/login", json={"password": STAFF_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def create_artist(staff_client: AsyncClient) -> Callable[[str], Awaitable[dict[str, Any]]]:
    """Register an artist through the API and return its JSON."""

    async def _create(name: str) -> dict[str, Any]:
        response = await staff_client.post("/api/artists", json={"name": name})
        assert response.status_code == 200, response.text
        return response.json()

    return _create


@pytest.fixture
def cast_vote(client: AsyncClient) -> Callable[..., Awaitable[Any]]:
    """Submit a vote from a given network origin."""

    async def _vote(artist_id: Any, score: Any, origin: str = VOTER_A) -> Any:
        return await client.post(
            "/api/vote",
            json={"artist_id": artist_id, "score": score},
            headers={"X-Forwarded-For": origin},
        )

    return _vote
