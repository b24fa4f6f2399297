"""
SQLite Database Adapter

This module implements the DatabaseAdapter interface for SQLite.
All SQLite-specific configuration and behavior is encapsulated here.

Key characteristics:
- File-based (single .db file)
- Single writer at a time (file locking), so connections wait on a busy timeout
- WAL journal lets readers proceed while a snippet is being consumed
"""

from typing import Any
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from copyit.db.interface import DatabaseAdapter
from copyit.db.postgres_adapter import PostgreSQLAdapter

SQLITE_PRAGMAS = (
    "PRAGMA journal_mode = WAL",
    "PRAGMA synchronous = NORMAL",
    "PRAGMA temp_store = MEMORY",
)


def _apply_pragmas(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        for pragma in SQLITE_PRAGMAS:
            cursor.execute(pragma)
    finally:
        cursor.close()


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter implementation.

    This adapter handles all SQLite-specific configuration and operations.
    """

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create SQLite async engine with appropriate configuration.

        SQLite-specific configuration:
        - NullPool: A fresh connection per session (file-based, no pooling needed)
        - check_same_thread=False: Required for async SQLite operations
        - timeout: Seconds a connection waits for a competing writer
        - WAL pragmas applied on every new connection

        Args:
            database_url: SQLite connection string (sqlite+aiosqlite:///...)
            **kwargs: Additional engine options (merged with SQLite defaults)

        Returns:
            Configured AsyncEngine for SQLite
        """
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        engine = create_async_engine(
            database_url,
            poolclass=self.get_pool_class(),
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )
        event.listen(engine.sync_engine, "connect", _apply_pragmas)
        return engine

    def get_pool_class(self) -> type[NullPool]:
        """
        Get the connection pool class for SQLite.

        Returns:
            NullPool class
        """
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        """Get SQLite-specific connection arguments."""
        return {
            "check_same_thread": False,
            "timeout": 15,
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        """Get SQLite-specific engine configuration."""
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }

    def get_dialect_name(self) -> str:
        return "sqlite"


def get_database_adapter(database_url: str = "sqlite") -> DatabaseAdapter:
    """
    Factory function to get the database adapter for a connection string.

    Returns PostgreSQLAdapter for postgresql URLs and SQLiteAdapter otherwise.

    Args:
        database_url: The configured DATABASE_URL

    Returns:
        DatabaseAdapter instance
    """
    if database_url.startswith("postgresql"):
        return PostgreSQLAdapter()
    return SQLiteAdapter()
