"""
Shared test fixtures.

Every test gets its own SQLite database file so tests never share state,
and the FastAPI app is wired to it through dependency overrides.
"""

from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from copyit.core.rate_limit import RateLimiter
from copyit.core.resources import get_rate_limiter
from copyit.core.setting import Settings
from copyit.db.session import create_schema, get_session, make_session_maker
from copyit.db.sqlite_adapter import SQLiteAdapter
from copyit.main import app


class FakeClock:
    """Controllable replacement for utcnow()."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


class ScriptedPaths:
    """Path generator returning a fixed sequence of paths (last one repeats)."""

    def __init__(self, *paths: str):
        self.paths = list(paths)
        self.calls = 0

    def generate(self) -> str:
        path = self.paths[min(self.calls, len(self.paths) - 1)]
        self.calls += 1
        return path


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, BASE_URL="https://copyit.test/")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = SQLiteAdapter().create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return make_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker):
    """HTTP client against the app with a test database and no rate limiting."""

    async def override_get_session():
        async with session_maker() as session:
            yield session
            await session.commit()

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_rate_limiter] = lambda: RateLimiter(client=None)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client

    app.dependency_overrides.clear()
