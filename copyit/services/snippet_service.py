"""
Snippet Lifecycle Service

This service handles the core business logic of the snippet lifecycle:
- Creation: validate, clamp the lifetime, allocate a unique path
- Retrieval: look up, hide expired snippets, consume one-time snippets once

Design Decisions:
- Path allocation is race tolerant: a candidate is inserted directly and the
  store's unique constraint decides; a collision just means another try
- Attempts are bounded; exhausting them is a terminal CapacityError
- Expired snippets raise the same NotFoundError as unknown paths
- One-time consumption is a conditional update whose row count gates the
  content, so concurrent retrievals cannot both receive it
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from copyit.core.exceptions import (
    CapacityError,
    ContentTooLargeError,
    GoneError,
    NotFoundError,
    PathCollisionError,
    ValidationError,
)
from copyit.core.setting import Settings, settings as default_settings
from copyit.core.validators import coerce_ttl, content_byte_length, sanitize_path
from copyit.db.models import Snippet, new_snippet_id, utcnow
from copyit.services.path_generator import PathGenerator
from copyit.services.snippet_store import SnippetStore

logger = logging.getLogger(__name__)


@dataclass
class CreatedSnippet:
    """Result of a successful creation."""
    path: str
    url: str
    expires_at: datetime
    created_at: datetime


class SnippetService:
    """
    Orchestrates snippet creation and retrieval.

    Separated from the API layer for testability: the path generator,
    settings and clock can all be swapped out.
    """

    def __init__(
        self,
        session: AsyncSession,
        path_generator: Optional[PathGenerator] = None,
        config: Optional[Settings] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        """
        Initialize the snippet service.

        Args:
            session: Database session
            path_generator: Source of candidate paths (default: word generator)
            config: Settings to read limits from (default: process settings)
            clock: Returns the current naive UTC time
        """
        self.store = SnippetStore(session)
        self.path_generator = path_generator or PathGenerator()
        self.config = config or default_settings
        self.clock = clock

    def build_url(self, path: str) -> str:
        return f"{self.config.BASE_URL.rstrip('/')}/{path}"

    def validate_content(self, content: Any) -> str:
        """
        Check that content is a non-empty string within the size limit.

        Raises:
            ValidationError: If content is missing, empty or not a string
            ContentTooLargeError: If the UTF-8 size exceeds the limit
        """
        if not content or not isinstance(content, str):
            raise ValidationError("Missing or invalid content")

        size = content_byte_length(content)
        if size > self.config.MAX_CONTENT_BYTES:
            raise ContentTooLargeError(size, self.config.MAX_CONTENT_BYTES)

        return content

    async def create_snippet(
        self,
        content: Any,
        ttl_seconds: Any = None,
        one_time: bool = False
    ) -> CreatedSnippet:
        """
        Store a new snippet under a freshly allocated path.

        Args:
            content: The text to store
            ttl_seconds: Requested lifetime (loosely typed, clamped)
            one_time: Whether the snippet may be retrieved only once

        Returns:
            CreatedSnippet with path, url and timestamps

        Raises:
            ValidationError: If content is invalid
            ContentTooLargeError: If content is too large
            CapacityError: If no unique path was found
            InternalError: If the database fails
        """
        content = self.validate_content(content)
        ttl = coerce_ttl(
            ttl_seconds,
            minimum=self.config.TTL_MIN_SECONDS,
            maximum=self.config.TTL_MAX_SECONDS,
            default=self.config.TTL_DEFAULT_SECONDS,
        )
        is_one_time = bool(one_time)
        max_attempts = self.config.PATH_MAX_ATTEMPTS

        for attempt in range(1, max_attempts + 1):
            path = self.path_generator.generate()
            created_at = self.clock()
            expires_at = created_at + timedelta(seconds=ttl)
            snippet_id = new_snippet_id()
            snippet = Snippet(
                id=snippet_id,
                path=path,
                content=content,
                ttl_seconds=ttl,
                is_one_time=is_one_time,
                is_consumed=False,
                created_at=created_at,
                expires_at=expires_at,
            )

            try:
                await self.store.insert(
                    snippet,
                    reclaim_expired=self.config.RECLAIM_EXPIRED_PATHS
                )
            except PathCollisionError:
                logger.info(f"Path collision (attempt {attempt}/{max_attempts})")
                continue

            logger.info(
                f"Created snippet id={snippet_id} ttl={ttl}s one_time={is_one_time}"
            )
            return CreatedSnippet(
                path=path,
                url=self.build_url(path),
                expires_at=expires_at,
                created_at=created_at,
            )

        logger.error(f"Failed to allocate a unique path after {max_attempts} attempts")
        raise CapacityError(max_attempts)

    async def retrieve_snippet(self, path: str) -> str:
        """
        Return the content stored under a path.

        One-time snippets are consumed (and committed) before the content
        is handed back.

        Args:
            path: The snippet path

        Returns:
            The raw content

        Raises:
            ValidationError: If the path is empty or too short
            NotFoundError: If the path is unknown or expired
            GoneError: If a one-time snippet was already consumed
            InternalError: If the database fails
        """
        sanitized = sanitize_path(path, min_length=self.config.PATH_MIN_LENGTH)
        if not sanitized:
            raise ValidationError("Invalid path")

        snippet = await self.store.get_by_path(sanitized)
        if snippet is None:
            raise NotFoundError(sanitized)

        now = self.clock()
        if now >= snippet.expires_at:
            raise NotFoundError(sanitized)

        if snippet.is_one_time:
            if snippet.is_consumed:
                raise GoneError(sanitized)
            if not await self.store.mark_consumed(snippet.id, now):
                raise GoneError(sanitized)
            logger.info(f"One-time snippet {snippet.id} consumed")

        return snippet.content
