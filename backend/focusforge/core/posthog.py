"""
Product analytics for progression events (PostHog).

Fire-and-forget: a failed capture is logged and never reaches the caller, so
analytics cannot block a reward. distinct_id is the caller's user id; every
event is tagged with the deployment environment.
"""

import logging
from typing import Optional

import posthog as _posthog

from focusforge.core.config import get_settings

logger = logging.getLogger(__name__)

# Event names (noun_verb)
SESSION_COMPLETED = "session_completed"
LEVEL_REACHED = "level_reached"
ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
QUEST_COMPLETED = "quest_completed"
POWER_UP_PURCHASED = "power_up_purchased"
POWER_UP_ACTIVATED = "power_up_activated"

_initialized = False
_environment = "development"


def init_posthog() -> None:
    """Configure the PostHog client from settings. Call once at app startup."""
    global _initialized, _environment
    settings = get_settings()
    _environment = settings.environment

    if not settings.posthog_enabled or not settings.posthog_api_key:
        logger.info("PostHog disabled (posthog_enabled=%s)", settings.posthog_enabled)
        return

    _posthog.api_key = settings.posthog_api_key
    _posthog.host = settings.posthog_host
    _posthog.debug = settings.debug
    _initialized = True
    logger.info("PostHog initialized (host=%s)", settings.posthog_host)


def shutdown_posthog() -> None:
    """Flush queued events. Call at app shutdown."""
    global _initialized
    if not _initialized:
        return
    _posthog.flush()
    _posthog.shutdown()
    _initialized = False


def capture(user_id: str, event: str, properties: Optional[dict] = None) -> None:
    """Queue one event; no-op when analytics is disabled."""
    if not _initialized:
        return

    props = {"environment": _environment}
    if properties:
        props.update(properties)

    try:
        _posthog.capture(distinct_id=user_id, event=event, properties=props)
    except Exception as e:
        logger.warning("PostHog capture failed for '%s': %s", event, e, extra={"user_id": user_id})
