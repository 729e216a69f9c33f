"""
Insight API endpoints.

Handles:
- GET / - AI productivity insights (fixed fallback when the provider fails)
"""

from fastapi import APIRouter, Depends, Request

from focusforge.core.identity import Caller, require_caller
from focusforge.core.rate_limit import limiter
from focusforge.models.gamification import InsightsResponse
from focusforge.services.insight_service import InsightService

router = APIRouter()


def get_insight_service() -> InsightService:
    return InsightService()


@router.get("", response_model=InsightsResponse)
@limiter.limit("10/minute")
async def get_insights(
    request: Request,
    caller: Caller = Depends(require_caller),
    insight_service: InsightService = Depends(get_insight_service),
) -> InsightsResponse:
    return insight_service.get_insights(caller.user_id)
