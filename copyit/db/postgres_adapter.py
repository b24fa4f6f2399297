"""
PostgreSQL Database Adapter

Production backend. Uses asyncpg through SQLAlchemy with a regular
connection pool; row-level locking makes concurrent one-time retrievals
and path inserts cheap compared to SQLite's file lock.
"""

from typing import Any, Optional
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import Pool

from copyit.db.interface import DatabaseAdapter


class PostgreSQLAdapter(DatabaseAdapter):
    """PostgreSQL database adapter implementation."""

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        return create_async_engine(
            database_url,
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )

    def get_pool_class(self) -> Optional[type[Pool]]:
        # Default async queue pool
        return None

    def get_connect_args(self) -> dict[str, Any]:
        return {}

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False,
            "pool_size": 10,
            "max_overflow": 20,
            "pool_pre_ping": True,
        }

    def get_dialect_name(self) -> str:
        return "postgresql"
