"""
Snippet Store

Persistence for snippet records on top of an async SQLAlchemy session.

Guarantees delegated to the database:
- Path uniqueness: the unique index rejects a second insert on the same path
- One-time consumption: a conditional UPDATE flips is_consumed at most once

No in-process locking is used; every operation is a single statement whose
atomicity comes from the database.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from copyit.core.exceptions import InternalError, PathCollisionError
from copyit.db.models import Snippet

logger = logging.getLogger(__name__)


class SnippetStore:
    """
    Data access for the snippets table.

    Each mutating method commits its own transaction so the caller knows
    the outcome is durable before acting on it.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize the store with a database session.

        Args:
            session: Async database session for database operations
        """
        self.session = session

    async def insert(self, snippet: Snippet, reclaim_expired: bool = False) -> Snippet:
        """
        Atomically insert a snippet.

        Args:
            snippet: Fully populated record
            reclaim_expired: Delete an expired record holding the same path first

        Returns:
            The stored snippet

        Raises:
            PathCollisionError: If the path is already taken
            InternalError: If the database fails for any other reason
        """
        try:
            if reclaim_expired:
                await self.session.execute(
                    delete(Snippet)
                    .where(Snippet.path == snippet.path)
                    .where(Snippet.expires_at <= snippet.created_at)
                )
            self.session.add(snippet)
            await self.session.flush()
            await self.session.commit()
            return snippet

        except IntegrityError:
            await self.session.rollback()
            raise PathCollisionError(snippet.path)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise InternalError("Failed to insert snippet", original_error=e)

    async def get_by_path(self, path: str) -> Optional[Snippet]:
        """
        Look up a snippet by its path.

        Args:
            path: The path to look up

        Returns:
            Snippet if found, None otherwise
        """
        try:
            statement = select(Snippet).where(Snippet.path == path)
            result = await self.session.execute(statement)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise InternalError("Failed to look up snippet", original_error=e)

    async def mark_consumed(self, snippet_id: str, now: datetime) -> bool:
        """
        Flip is_consumed for a live one-time snippet.

        Only one caller can ever win: the UPDATE matches the row only while
        is_consumed is still false, and the affected row count tells the
        caller whether it was the one that flipped it.

        Args:
            snippet_id: Primary key of the snippet
            now: Current time; an expired row is never consumed

        Returns:
            True if this call consumed the snippet, False otherwise
        """
        statement = (
            update(Snippet)
            .where(Snippet.id == snippet_id)
            .where(Snippet.is_one_time == True)  # noqa: E712
            .where(Snippet.is_consumed == False)  # noqa: E712
            .where(Snippet.expires_at > now)
            .values(is_consumed=True)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(statement)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise InternalError("Failed to consume snippet", original_error=e)

        consumed = result.rowcount == 1
        if not consumed:
            logger.debug(f"Snippet {snippet_id} was already consumed")
        return consumed
