"""
Redis connection, key layout and the per-user progress lock.

Redis backs the progress lock that serializes reward application, slowapi's
counters and the insight cache.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import LockError, RedisError

from focusforge.core.config import get_settings
from focusforge.models.gamification import ProgressBusyError

settings = get_settings()
logger = logging.getLogger(__name__)

_redis_pool: Optional[ConnectionPool] = None
_redis_client: Optional[Redis] = None


def _reset_redis() -> None:
    global _redis_pool, _redis_client
    _redis_pool = None
    _redis_client = None


def _backoff_seconds(attempt: int) -> int:
    """1, 2, 4, ... seconds after the first, second, third failed ping."""
    return 2**attempt


async def init_redis() -> None:
    """
    Build the pool and verify Redis answers before the app takes traffic.

    Pings up to redis_connect_attempts times with exponential backoff and
    raises RuntimeError when every attempt fails.
    """
    global _redis_pool, _redis_client

    if _redis_pool is None:
        _redis_pool = ConnectionPool.from_url(
            settings.redis_url,
            max_connections=settings.redis_max_connections,
            decode_responses=True,
        )
        _redis_client = Redis(connection_pool=_redis_pool)

    attempts = settings.redis_connect_attempts
    for attempt in range(attempts):
        try:
            await _redis_client.ping()
        except RedisError as e:
            if attempt == attempts - 1:
                raise RuntimeError(f"Redis connection failed after {attempts} attempts: {e}") from e
            delay = _backoff_seconds(attempt)
            logger.warning(
                "Redis ping %d/%d failed, retrying in %ds: %s", attempt + 1, attempts, delay, e
            )
            await asyncio.sleep(delay)
        else:
            logger.info("Redis reachable at startup")
            return


async def close_redis() -> None:
    if _redis_client is not None:
        await _redis_client.close()
    if _redis_pool is not None:
        await _redis_pool.disconnect()
    _reset_redis()


def get_redis() -> Redis:
    """Shared client; raises RuntimeError before init_redis() has run."""
    if _redis_client is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis_client


class GamificationKeys:
    """Key layout. Everything per user lives under user:{user_id}:."""

    @staticmethod
    def progress_lock(user_id: str) -> str:
        return f"user:{user_id}:progress_lock"

    @staticmethod
    def insights(user_id: str) -> str:
        return f"user:{user_id}:insights"


@asynccontextmanager
async def user_progress_lock(user_id: str) -> AsyncIterator[None]:
    """
    Run the block while holding the user's progress lock.

    Two session completions for one user never interleave their
    read-modify-write of the profile. Raises ProgressBusyError (HTTP 409) when
    the lock is not free within progress_lock_wait_seconds.
    """
    lock = get_redis().lock(
        GamificationKeys.progress_lock(user_id),
        timeout=settings.progress_lock_timeout_seconds,
        blocking_timeout=settings.progress_lock_wait_seconds,
    )
    if not await lock.acquire():
        logger.info("Progress lock busy", extra={"user_id": user_id})
        raise ProgressBusyError(user_id)

    try:
        yield
    finally:
        try:
            await lock.release()
        except LockError:
            logger.warning("Progress lock expired before release", extra={"user_id": user_id})
