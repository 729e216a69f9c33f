"""
Inventory API endpoints.

Handles:
- GET / - Owned badges, titles and power-ups
- POST /equip - Equip an owned badge or title
- DELETE /equip/{item_type} - Unequip a badge or title
"""

from typing import Literal

from fastapi import APIRouter, Depends, Request

from focusforge.core.identity import Caller, require_caller
from focusforge.core.rate_limit import limiter
from focusforge.core.redis import user_progress_lock
from focusforge.models.gamification import EquippedItems, EquipRequest, InventoryResponse
from focusforge.services.inventory_service import InventoryService

router = APIRouter()


def get_inventory_service() -> InventoryService:
    return InventoryService()


@router.get("", response_model=InventoryResponse)
@limiter.limit("60/minute")
async def get_inventory(
    request: Request,
    caller: Caller = Depends(require_caller),
    inventory_service: InventoryService = Depends(get_inventory_service),
) -> InventoryResponse:
    return inventory_service.get_inventory(caller.user_id)


@router.post("/equip", response_model=EquippedItems)
@limiter.limit("30/minute")
async def equip_item(
    request: Request,
    payload: EquipRequest,
    caller: Caller = Depends(require_caller),
    inventory_service: InventoryService = Depends(get_inventory_service),
) -> EquippedItems:
    """Equip a badge or title. 403 if the user doesn't own it."""
    async with user_progress_lock(caller.user_id):
        return inventory_service.equip(caller.user_id, payload.item_type, payload.item_id)


@router.delete("/equip/{item_type}", response_model=EquippedItems)
@limiter.limit("30/minute")
async def unequip_item(
    request: Request,
    item_type: Literal["badge", "title"],
    caller: Caller = Depends(require_caller),
    inventory_service: InventoryService = Depends(get_inventory_service),
) -> EquippedItems:
    async with user_progress_lock(caller.user_id):
        return inventory_service.unequip(caller.user_id, item_type)
