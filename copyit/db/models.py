"""
Database Models for the Snippet Service

This module defines the SQLModel database schema for:
- Snippet: A stored text payload addressable by a short path

Design Decisions:
- Unique index on path: the store, not the application, guarantees uniqueness
- Index on expires_at: supports an external sweeper deleting dead rows
- Timestamps are stored as naive UTC so SQLite and PostgreSQL compare alike
"""

import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, DateTime, Integer, String, Text


def utcnow() -> datetime:
    """Current time as naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_snippet_id() -> str:
    return str(uuid.uuid4())


class Snippet(SQLModel, table=True):
    """
    Main table storing snippets.

    Fields:
    - id: Opaque UUID primary key
    - path: Unique human-typeable lookup key (e.g. "nova-ridge-echo-quartz")
    - content: The pasted text
    - ttl_seconds: Clamped lifetime, kept for audit (expires_at is authoritative)
    - is_one_time: Content may be retrieved at most once
    - is_consumed: Flipped once by the first successful one-time retrieval
    - created_at / expires_at: Lifetime bounds

    Indexes:
    - path: Unique index for lookups and collision detection
    - expires_at: For expiry sweeps
    """
    __tablename__ = "snippets"

    id: str = Field(
        default_factory=new_snippet_id,
        sa_column=Column(String(36), primary_key=True)
    )
    path: str = Field(
        sa_column=Column(String(128), nullable=False, unique=True, index=True)
    )
    content: str = Field(sa_column=Column(Text, nullable=False))
    ttl_seconds: int = Field(sa_column=Column(Integer, nullable=False))
    is_one_time: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False)
    )
    is_consumed: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False)
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime, nullable=False)
    )
    expires_at: datetime = Field(
        sa_column=Column(DateTime, nullable=False, index=True)
    )

