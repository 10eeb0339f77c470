import os

# Must be configured before the application settings are imported
os.environ.setdefault("DATABASE_URI", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import AsyncGenerator, Awaitable, Callable, Dict, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.session import get_db
from app.main import app
from app.models.base import Base


# Use an in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# One shared connection keeps the in-memory database alive across sessions
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = async_sessionmaker(
    bind=test_engine, class_=AsyncSession, expire_on_commit=False
)


# Override the get_db dependency
async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestingSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# Apply the test database dependency override
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
async def setup_database() -> AsyncGenerator[None, None]:
    # Create all tables
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    # Drop all tables
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def session_factory() -> async_sessionmaker:
    """
    Open independent sessions, as separate requests would.
    """
    return TestingSessionLocal


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def _auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers() -> Callable[[str], Dict[str, str]]:
    return _auth_headers


@pytest.fixture
def register_user(async_client: AsyncClient) -> Callable[..., Awaitable[Dict]]:
    """
    Register a user through the API and return the ``{token, user}`` body.
    """

    async def _register(username: str = "alice", password: str = "secret123", **extra) -> Dict:
        payload = {
            "first_name": username.capitalize(),
            "last_name": "Tester",
            "username": username,
            "email": f"{username}@example.com",
            "password": password,
            **extra,
        }
        response = await async_client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def create_project(async_client: AsyncClient) -> Callable[..., Awaitable[Dict]]:
    """
    Create a project through the API as the owner of ``token``.
    """

    async def _create(
        token: str,
        key: str = "web",
        bug_types: Optional[list] = None,
        team_members: Optional[list] = None,
        **extra,
    ) -> Dict:
        payload = {
            "name": f"Project {key.upper()}",
            "description": "A project under test",
            "key": key,
            "bug_types": bug_types or [],
            "team_members": team_members or [],
            **extra,
        }
        response = await async_client.post(
            "/api/projects", json=payload, headers=_auth_headers(token)
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create
