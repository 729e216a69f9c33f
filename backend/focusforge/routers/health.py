"""
Liveness and dependency checks.

Handles:
- GET /health - API liveness with version and environment
- GET /health/redis - Redis reachability (progress locks, rate limits, cache)
- GET / - Welcome message
"""

import asyncio

from fastapi import APIRouter

from focusforge.core.config import get_settings
from focusforge.core.constants import APP_VERSION
from focusforge.core.redis import get_redis

router = APIRouter()

REDIS_PING_TIMEOUT_SECONDS = 2.0


@router.get("/health")
async def health_check():
    settings = get_settings()
    return {
        "status": "healthy",
        "service": "focusforge-api",
        "version": APP_VERSION,
        "environment": settings.environment,
    }


@router.get("/health/redis")
async def redis_health_check():
    """Unhealthy when Redis is down: session completion cannot take the progress lock."""
    try:
        await asyncio.wait_for(get_redis().ping(), timeout=REDIS_PING_TIMEOUT_SECONDS)
    except Exception as e:
        return {"status": "unhealthy", "service": "redis", "error": str(e) or type(e).__name__}
    return {"status": "healthy", "service": "redis"}


@router.get("/")
async def root():
    return {"message": "Welcome to FocusForge API", "version": APP_VERSION, "docs": "/docs"}
