"""
Quest API endpoints.

Handles:
- GET / - Current quests (generates daily / weekly quests when due)
- PATCH /{quest_id}/progress - Set progress on a quest
"""

from fastapi import APIRouter, Depends, Request

from focusforge.core.identity import Caller, require_caller
from focusforge.core.rate_limit import limiter
from focusforge.core.redis import user_progress_lock
from focusforge.models.gamification import (
    QuestProgressRequest,
    QuestProgressResponse,
    QuestsResponse,
)
from focusforge.services.quest_service import QuestService

router = APIRouter()


def get_quest_service() -> QuestService:
    return QuestService()


@router.get("", response_model=QuestsResponse)
@limiter.limit("60/minute")
async def list_quests(
    request: Request,
    caller: Caller = Depends(require_caller),
    quest_service: QuestService = Depends(get_quest_service),
) -> QuestsResponse:
    async with user_progress_lock(caller.user_id):
        return quest_service.get_quests(caller.user_id)


@router.patch("/{quest_id}/progress", response_model=QuestProgressResponse)
@limiter.limit("30/minute")
async def update_quest_progress(
    request: Request,
    quest_id: str,
    payload: QuestProgressRequest,
    caller: Caller = Depends(require_caller),
    quest_service: QuestService = Depends(get_quest_service),
) -> QuestProgressResponse:
    """
    Set a quest's progress value.

    Completing the quest credits its rewards once; further updates get 400.
    """
    async with user_progress_lock(caller.user_id):
        return quest_service.update_progress(caller.user_id, quest_id, payload.progress)
