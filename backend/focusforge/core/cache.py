"""
Redis cache for regenerable per-user data (AI insights).

Values are pydantic models stored as JSON. A Redis outage or an entry that no
longer matches the model is logged and treated as a miss; the caller
recomputes. Uses its own sync connection because services are synchronous.
"""

import logging
from typing import Optional, TypeVar

from pydantic import BaseModel, ValidationError
from redis import Redis as SyncRedis
from redis.exceptions import RedisError

from focusforge.core.config import get_settings

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_sync_redis: Optional[SyncRedis] = None


def _get_cache_client() -> SyncRedis:
    global _sync_redis
    if _sync_redis is None:
        settings = get_settings()
        _sync_redis = SyncRedis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=settings.cache_socket_timeout_seconds,
            socket_timeout=settings.cache_socket_timeout_seconds,
        )
    return _sync_redis


def cache_get(key: str, model: type[ModelT]) -> Optional[ModelT]:
    """Cached value parsed as `model`, or None on miss, outage or stale shape."""
    try:
        raw = _get_cache_client().get(key)
    except RedisError:
        logger.warning("Cache get failed for key=%s", key, exc_info=True)
        return None

    if raw is None:
        return None

    try:
        return model.model_validate_json(raw)
    except ValidationError:
        logger.warning("Discarding cache entry %s: does not match %s", key, model.__name__)
        return None


def cache_set(key: str, value: BaseModel, ttl: int) -> None:
    """Store a model as JSON for `ttl` seconds."""
    try:
        _get_cache_client().set(key, value.model_dump_json(), ex=ttl)
    except RedisError:
        logger.warning("Cache set failed for key=%s", key, exc_info=True)


def reset_cache_client() -> None:
    """Drop the shared client (tests)."""
    global _sync_redis
    _sync_redis = None
