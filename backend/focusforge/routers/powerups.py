"""
Power-up API endpoints.

Handles:
- GET / - Catalog, owned copies and live power-ups
- POST /purchase - Buy a power-up with coins
- POST /use - Activate an owned power-up
"""

from fastapi import APIRouter, Depends, Request

from focusforge.core.identity import Caller, require_caller
from focusforge.core.rate_limit import limiter
from focusforge.core.redis import user_progress_lock
from focusforge.models.gamification import PowerUpActionRequest, PowerUpsResponse
from focusforge.services.powerup_service import PowerUpService

router = APIRouter()


def get_powerup_service() -> PowerUpService:
    return PowerUpService()


@router.get("", response_model=PowerUpsResponse)
@limiter.limit("60/minute")
async def list_power_ups(
    request: Request,
    caller: Caller = Depends(require_caller),
    powerup_service: PowerUpService = Depends(get_powerup_service),
) -> PowerUpsResponse:
    async with user_progress_lock(caller.user_id):
        return powerup_service.get_power_ups(caller.user_id)


@router.post("/purchase", response_model=PowerUpsResponse)
@limiter.limit("20/minute")
async def purchase_power_up(
    request: Request,
    payload: PowerUpActionRequest,
    caller: Caller = Depends(require_caller),
    powerup_service: PowerUpService = Depends(get_powerup_service),
) -> PowerUpsResponse:
    """Buy one copy. 402 when coins are short, 404 for an unknown id."""
    async with user_progress_lock(caller.user_id):
        return powerup_service.purchase(caller.user_id, payload.power_up_id)


@router.post("/use", response_model=PowerUpsResponse)
@limiter.limit("20/minute")
async def use_power_up(
    request: Request,
    payload: PowerUpActionRequest,
    caller: Caller = Depends(require_caller),
    powerup_service: PowerUpService = Depends(get_powerup_service),
) -> PowerUpsResponse:
    """Activate one owned copy. 409 when none is owned."""
    async with user_progress_lock(caller.user_id):
        return powerup_service.use(caller.user_id, payload.power_up_id)
