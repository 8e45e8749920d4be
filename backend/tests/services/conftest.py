"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - app.state populated by hand: ASGITransport does not run the lifespan

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - bcrypt rounds at the minimum (4): hashing cost dominates test time otherwise
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from loantracker.core.token_service import TokenService
from loantracker.db.base import Base
from loantracker.infrastructure.database import get_db, DatabaseSessionManager
from loantracker.infrastructure.password_hasher import PasswordHasher
import loantracker.models  # noqa: F401
from loantracker.main import app

TEST_SECRET = "test-secret-not-for-production"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def token_secret():
    return TEST_SECRET


@pytest.fixture
def token_service(token_secret):
    return TokenService(token_secret)


@pytest.fixture
def password_hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
async def client(test_engine, test_session_factory, token_service, password_hasher):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    app.state.db_manager = fake_manager
    app.state.token_service = token_service
    app.state.password_hasher = password_hasher

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    for attr in ("db_manager", "token_service", "password_hasher"):
        delattr(app.state, attr)


@pytest.fixture
def login_as(client):
    """Register (if needed) and log in; returns Authorization headers."""
    async def _login(username: str, password: str = "secret123") -> dict:
        await client.post(
            "/api/auth/register",
            json={"username": username, "password": password},
        )
        res = await client.post(
            "/api/auth/login",
            json={"username": username, "password": password},
        )
        assert res.status_code == 200, res.text
        return {"Authorization": f"Bearer {res.json()['token']}"}
    return _login
