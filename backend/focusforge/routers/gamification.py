"""
Gamification API endpoints.

Handles:
- GET /stats - Level, lifetime stats and leaderboard rank
- GET /level - Current level progress
"""

from fastapi import APIRouter, Depends, Request

from focusforge.core.identity import Caller, require_caller
from focusforge.core.rate_limit import limiter
from focusforge.models.gamification import LevelInfo, StatsResponse
from focusforge.services.progression_service import ProgressionService

router = APIRouter()


def get_progression_service() -> ProgressionService:
    return ProgressionService()


@router.get("/stats", response_model=StatsResponse)
@limiter.limit("60/minute")
async def get_stats(
    request: Request,
    caller: Caller = Depends(require_caller),
    progression_service: ProgressionService = Depends(get_progression_service),
) -> StatsResponse:
    return progression_service.get_stats(caller.user_id)


@router.get("/level", response_model=LevelInfo)
@limiter.limit("60/minute")
async def get_level(
    request: Request,
    caller: Caller = Depends(require_caller),
    progression_service: ProgressionService = Depends(get_progression_service),
) -> LevelInfo:
    """Level recomputed from lifetime XP."""
    return progression_service.get_level(caller.user_id)
