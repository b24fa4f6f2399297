"""
Process-wide Resources

This module owns the state shared by every request in one process:
- The database engine (schema created on startup if configured)
- The Redis client and the rate limiter built on it

Design:
- Initialized once on application startup, torn down on shutdown
- Handed to request handlers through FastAPI dependencies
- Never re-created per request
"""

import logging
from typing import Optional

from redis.asyncio import Redis

from copyit.core.rate_limit import RateLimiter
from copyit.core.setting import settings
from copyit.db.session import create_schema, engine

logger = logging.getLogger(__name__)

# Global Redis client (initialized on startup, None when not configured)
_redis: Optional[Redis] = None

# Global rate limiter (fail-open until initialized)
_rate_limiter: RateLimiter = RateLimiter(client=None)


def get_rate_limiter() -> RateLimiter:
    """
    Get the process rate limiter.

    Returns:
        RateLimiter instance; allows everything when Redis is not configured
    """
    return _rate_limiter


async def initialize_resources() -> None:
    """
    Prepare the database schema and connect the counter store.

    A Redis that cannot be reached leaves rate limiting disabled
    rather than blocking startup.
    """
    global _redis, _rate_limiter

    if settings.AUTO_CREATE_SCHEMA:
        await create_schema(engine)
        logger.info("Database schema ready")

    if not settings.REDIS_URL:
        logger.info("REDIS_URL not set, rate limiting disabled")
        return

    if _redis is not None:
        logger.warning("Redis client already initialized")
        return

    client = Redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_timeout=5,
        socket_connect_timeout=5,
    )
    try:
        await client.ping()
    except Exception as e:
        logger.warning(f"Redis unavailable, rate limiting disabled: {e}")
        await client.aclose()
        return

    _redis = client
    _rate_limiter = RateLimiter(client=client)
    logger.info("Rate limiter connected to Redis")


async def shutdown_resources() -> None:
    """Close the Redis client and dispose of the database engine."""
    global _redis, _rate_limiter

    if _redis is not None:
        try:
            await _redis.aclose()
            logger.info("Redis connection closed")
        except Exception as e:
            logger.warning(f"Failed to close Redis connection: {e}")
        _redis = None
        _rate_limiter = RateLimiter(client=None)

    await engine.dispose()
    logger.info("Database engine disposed")
