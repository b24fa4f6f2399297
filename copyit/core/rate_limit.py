"""
Rate Limiting

Fixed-window request counters kept in Redis, one counter per
(action class, client key) pair.

Design Decisions:
- Redis holds the counters so every process shares the same windows
- The window key is created with its expiry and incremented in a single
  MULTI/EXEC: a racing first request can neither reset the window nor
  leave a counter without a TTL
- Fail-open: without a configured Redis (or when Redis errors) every
  request is allowed; availability wins over abuse prevention
- Advisory only: the client key comes from a spoofable forwarded header
"""

import logging
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from copyit.core.setting import settings

logger = logging.getLogger(__name__)

ACTION_CREATE = "create"
ACTION_RETRIEVE = "retrieve"

# Requests allowed per client per window
RATE_LIMITS = {
    ACTION_CREATE: settings.RATE_LIMIT_CREATE,
    ACTION_RETRIEVE: settings.RATE_LIMIT_RETRIEVE,
}


class RateLimiter:
    """
    Fixed-window rate limiter.

    Usage:
        limiter = RateLimiter(redis_client)
        if not await limiter.allow("203.0.113.7", "create"):
            ...
    """

    def __init__(
        self,
        client: Optional[Redis] = None,
        limits: Optional[dict[str, int]] = None,
        window_seconds: int = settings.RATE_LIMIT_WINDOW_SECONDS,
        key_prefix: str = "rate-limit"
    ):
        """
        Initialize the limiter.

        Args:
            client: Redis client; None disables limiting (fail-open)
            limits: Maximum requests per window for each action class
            window_seconds: Window length in seconds
            key_prefix: Namespace for counter keys
        """
        self.client = client
        self.limits = dict(limits or RATE_LIMITS)
        self.window_seconds = window_seconds
        self.key_prefix = key_prefix

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def key_for(self, client_key: str, action_class: str) -> str:
        return f"{self.key_prefix}:{action_class}:{client_key}"

    async def hit(self, client_key: str, action_class: str) -> int:
        """
        Count one request and return the counter value for the current window.

        Raises:
            RedisError: If the counter store fails
        """
        key = self.key_for(client_key, action_class)
        async with self.client.pipeline(transaction=True) as pipe:
            pipe.set(key, 0, ex=self.window_seconds, nx=True)
            pipe.incr(key)
            _, count = await pipe.execute()
        return int(count)

    async def allow(self, client_key: str, action_class: str) -> bool:
        """
        Decide whether a request may proceed.

        Args:
            client_key: Caller identity (forwarded address or "unknown")
            action_class: "create" or "retrieve"

        Returns:
            True if the request is within its window's limit
        """
        if action_class not in self.limits:
            raise ValueError(f"Unknown rate limit action class: {action_class}")

        if not self.enabled:
            return True

        try:
            count = await self.hit(client_key, action_class)
        except RedisError as e:
            logger.warning(f"Rate limit store unavailable, allowing request: {e}")
            return True

        allowed = count <= self.limits[action_class]
        if not allowed:
            logger.info(
                f"Rate limit exceeded: action={action_class} client={client_key} count={count}"
            )
        return allowed
