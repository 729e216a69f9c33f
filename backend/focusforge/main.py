"""FocusForge API: rewards, levels, quests and power-ups for completed focus sessions."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from focusforge.core.config import get_settings
from focusforge.core.constants import APP_VERSION
from focusforge.core.exceptions import register_exception_handlers
from focusforge.core.logging_config import setup_logging
from focusforge.core.middleware import CallerIdentityMiddleware, CorrelationIDMiddleware
from focusforge.core.posthog import init_posthog, shutdown_posthog
from focusforge.core.rate_limit import limiter, rate_limit_exceeded_handler
from focusforge.core.redis import close_redis, init_redis
from focusforge.routers import (
    gamification,
    health,
    insights,
    inventory,
    powerups,
    quests,
    sessions,
)

settings = get_settings()
logger = logging.getLogger(__name__)

# (router module, path under api_prefix, OpenAPI tag)
API_ROUTERS = (
    (sessions, "/sessions", "Sessions"),
    (gamification, "/gamification", "Gamification"),
    (powerups, "/powerups", "Power-ups"),
    (quests, "/quests", "Quests"),
    (inventory, "/inventory", "Inventory"),
    (insights, "/insights", "Insights"),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("%s %s starting (%s)", settings.app_name, APP_VERSION, settings.environment)
    await init_redis()
    init_posthog()
    try:
        yield
    finally:
        shutdown_posthog()
        await close_redis()
        logger.info("%s stopped", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="Reward and leveling API for focus sessions",
    version=APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)
# Added last runs first: correlation id wraps identity
app.add_middleware(CallerIdentityMiddleware)
app.add_middleware(CorrelationIDMiddleware)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
register_exception_handlers(app)

app.include_router(health.router, tags=["Health"])
for module, path, tag in API_ROUTERS:
    app.include_router(module.router, prefix=f"{settings.api_prefix}{path}", tags=[tag])
