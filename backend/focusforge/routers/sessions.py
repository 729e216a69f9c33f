"""
Focus session API endpoints.

Handles:
- POST /complete - Apply a completed focus session
"""

import logging

from fastapi import APIRouter, Depends, Request

from focusforge.core.identity import Caller, require_caller
from focusforge.core.rate_limit import limiter
from focusforge.core.redis import user_progress_lock
from focusforge.models.gamification import SessionCompleteRequest, SessionCompleteResponse
from focusforge.services.progression_service import ProgressionService
from focusforge.tasks.insight_tasks import refresh_user_insights

logger = logging.getLogger(__name__)

router = APIRouter()


def get_progression_service() -> ProgressionService:
    return ProgressionService()


@router.post("/complete", response_model=SessionCompleteResponse)
@limiter.limit("30/minute")
async def complete_session(
    request: Request,
    payload: SessionCompleteRequest,
    caller: Caller = Depends(require_caller),
    progression_service: ProgressionService = Depends(get_progression_service),
) -> SessionCompleteResponse:
    """
    Award XP and coins for a completed session.

    Also updates the streak, session-driven quests and achievements. Runs
    under the user's progress lock; a concurrent update gets 409.
    """
    async with user_progress_lock(caller.user_id):
        response = progression_service.complete_session(caller.user_id, payload)

    try:
        refresh_user_insights.delay(caller.user_id)
    except Exception as e:
        # Insights are refreshed on next read if the broker is down
        logger.warning("Failed to queue insight refresh for %s: %s", caller.user_id, e)

    return response
