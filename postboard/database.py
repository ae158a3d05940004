"""
Postboard — Database Handle & Session Management
==================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   A `Database` object owns the engine and session factory. It is built
       from Settings by create_app(), stored on `app.state.database`, and
       handed to route handlers through the `get_db_session` dependency.
       Sessions auto-commit on success and roll back on error.
Who:   Route handlers (via Depends), the lifespan hook, Alembic, tests.
When:  One Database per application; one session per request.

Connection Pooling:
    PostgreSQL (asyncpg): pool_size / max_overflow / pre_ping from Settings,
    connections recycled hourly.
    SQLite (aiosqlite, tests/local): a single shared connection (StaticPool)
    so an in-memory database is visible to every session.
"""

from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from postboard.config import Settings
from postboard.services.retry import SESSION_INFO_KEY, ReadRetry


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers with this metadata, which Alembic reads for
    migrations and tests use for create_all().
    """
    pass


class Database:
    """
    Explicitly constructed data-access handle.

    Attributes:
        engine:          AsyncEngine managing the connection pool
        session_factory: async_sessionmaker producing AsyncSession objects
    """

    def __init__(self, settings: Settings):
        self.url = settings.database_url
        self.engine: AsyncEngine = create_async_engine(
            settings.database_url,
            echo=settings.log_level == "DEBUG",
            **self._engine_options(settings),
        )
        # expire_on_commit=False: response models are built after commit
        # info carries the read-retry policy to the services
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            info={SESSION_INFO_KEY: ReadRetry.from_settings(settings)},
        )

    @staticmethod
    def _engine_options(settings: Settings) -> Dict[str, Any]:
        if settings.is_sqlite:
            return {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }
        return {
            "pool_size": settings.db_pool_size,
            "max_overflow": settings.db_max_overflow,
            "pool_pre_ping": settings.db_pool_pre_ping,
            "pool_recycle": 3600,
        }

    async def ping(self) -> None:
        """
        Execute SELECT 1. Raises whatever the driver raises when the
        database is unreachable.
        """
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_all(self) -> None:
        """Create every table known to Base.metadata (tests and local dev)."""
        # Import models so they register with Base.metadata
        from postboard.models import category, comment, post, user  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections (application shutdown)."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Takes the Database handle the app was built with
        2. Yields a fresh session to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises for the global handlers
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/api/posts/count")
        async def count(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
