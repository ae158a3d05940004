"""
Postboard — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all
       tests.

Fixture Hierarchy:
    Session-scoped (created once for all tests):
    └── password_hash: one bcrypt hash reused by seeded users

    Function-scoped (created fresh for each test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── settings: Settings over an in-memory SQLite database
    ├── database: Database handle with every table created
    ├── test_client: HTTPX AsyncClient for API endpoint testing
    ├── make_user: seeds a user row and returns (user, auth headers)
    └── make_post: seeds a post through the API
"""

import itertools
import os
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set BEFORE any app imports so nothing reaches a real database
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["PORT"] = "8000"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["LOG_LEVEL"] = "WARNING"

from postboard.config import Settings  # noqa: E402
from postboard.database import Database  # noqa: E402
from postboard.main import create_app  # noqa: E402
from postboard.models.user import User  # noqa: E402
from postboard.security import Identity, create_access_token, hash_password  # noqa: E402
from postboard.services.retry import SESSION_INFO_KEY, ReadRetry  # noqa: E402

TEST_PASSWORD = "password123"


# ══════════════════════════════════════════════════════════════════════════
# Session-Scoped Fixtures (created once for all tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture(scope="session")
def password_hash() -> str:
    """bcrypt is deliberately slow; seeded users share one hash."""
    return hash_password(TEST_PASSWORD)


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Reads run with a single attempt so failures surface immediately.

    Usage:
        async def test_get_post(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = post
            result = await post_service.get_post(mock_db_session, post_id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    session.info = {SESSION_INFO_KEY: ReadRetry(max_attempts=1)}
    return session


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        port=8000,
        jwt_secret_key="test-secret-key",
        log_level="WARNING",
        retry_max_attempts=1,
    )


@pytest_asyncio.fixture
async def database(settings):
    """A fresh in-memory database per test, schema created."""
    db = Database(settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def test_client(settings, database):
    """
    Provides an async HTTP test client for endpoint testing.

    How:     Uses ASGITransport to route requests directly to the app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    app = create_app(settings=settings, database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_user(database, settings, password_hash):
    """
    Insert a user directly and mint their token.

    Returns an async factory: `user, headers = await make_user(is_admin=True)`.
    """
    counter = itertools.count(1)

    async def _make(is_admin: bool = False, username: str = None):
        n = next(counter)
        async with database.session_factory() as session:
            user = User(
                username=username or f"user{n}",
                email=f"user{n}@example.com",
                password=password_hash,
                is_admin=is_admin,
            )
            session.add(user)
            await session.commit()

        token = create_access_token(Identity(id=user.id, is_admin=is_admin), settings)
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def make_post(test_client):
    """Create a post through the API and return its JSON record."""

    async def _make(headers, title="A post title", description="A description long enough", **extra):
        response = await test_client.post(
            "/api/posts",
            json={"title": title, "description": description, **extra},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["post"]

    return _make
