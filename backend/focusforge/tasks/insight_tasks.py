"""
Celery tasks for AI insights.

Handles:
- Regenerating a user's cached insights after a completed session
"""

import logging

from focusforge.core.celery_app import celery_app
from focusforge.services.insight_service import InsightService

logger = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
)
def refresh_user_insights(self, user_id: str) -> dict:
    """
    Regenerate and cache insights for one user.

    Provider failures already fall back to the default insights inside the
    service; retries only cover storage errors (profile read, cache write).

    Returns:
        Dict with the user id and where the insights came from
    """
    try:
        insights = InsightService().refresh_insights(user_id)
    except Exception as exc:
        logger.error("Insight refresh failed for user %s: %s", user_id, exc)
        raise self.retry(exc=exc)

    logger.info("Refreshed insights for user %s (source=%s)", user_id, insights.source)
    return {"user_id": user_id, "source": insights.source}
