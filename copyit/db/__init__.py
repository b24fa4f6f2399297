"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter / PostgreSQLAdapter: Backend-specific configuration
- Session management: Database session creation and management
"""

from copyit.db.interface import DatabaseAdapter
from copyit.db.session import get_session, async_session_maker, engine

__all__ = [
    "DatabaseAdapter",
    "get_session",
    "async_session_maker",
    "engine",
]
