"""
Database Session Management with Connection Pooling

This module handles async database connections using SQLAlchemy's async engine.
Uses a database abstraction layer to support different database backends.

Key Features:
- Database abstraction: SQLite by default, PostgreSQL selected from DATABASE_URL
- Async session management: Proper async context management
- Error handling: Automatic rollback on exceptions
- Explicit lifecycle: schema creation on startup, engine disposal on shutdown
"""

from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from copyit.core.setting import settings
from copyit.db.sqlite_adapter import get_database_adapter
from copyit.db import models  # noqa: F401  (registers tables on SQLModel.metadata)

db_adapter = get_database_adapter(settings.DATABASE_URL)

# Created once per process; connections are opened lazily
engine = db_adapter.create_engine(
    settings.DATABASE_URL
)


def make_session_maker(bind: AsyncEngine) -> async_sessionmaker:
    """Build a session factory bound to an engine."""
    return async_sessionmaker(
        bind,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,  # Prevents SQLAlchemy from expiring objects after commit
        autocommit=False,
        autoflush=False,
    )


async_session_maker = make_session_maker(engine)


async def create_schema(bind: AsyncEngine = engine) -> None:
    """Create missing tables and indexes (idempotent)."""
    async with bind.begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)


async def check_database(bind: AsyncEngine = engine) -> bool:
    """Return True when the database answers a trivial query."""
    async with bind.connect() as connection:
        await connection.execute(text("SELECT 1"))
    return True


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI to get database session.

    This function:
    - Creates a new async session
    - Yields it to the endpoint
    - Commits anything still pending on success
    - Rolls back on exception

    Usage in FastAPI:
        @router.get("/endpoint")
        async def endpoint(session: AsyncSession = Depends(get_session)):
            pass
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
