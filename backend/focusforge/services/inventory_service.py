"""
Inventory service for owned cosmetics and power-ups.

Badges and titles are granted by achievements; a user can equip one of each.
"""

import logging
from typing import Optional

from supabase import Client

from focusforge.models.gamification import (
    EquippedItems,
    GamificationProfile,
    InventoryResponse,
    ItemNotOwnedError,
)
from focusforge.services.profile_service import ProfileService

logger = logging.getLogger(__name__)


def _equipped(profile: GamificationProfile) -> EquippedItems:
    return EquippedItems(badge=profile.equipped_badge, title=profile.equipped_title)


class InventoryService:
    """Service for inventory listing and equipping cosmetics."""

    def __init__(self, supabase: Optional[Client] = None):
        self.profiles = ProfileService(supabase)

    def get_inventory(self, user_id: str) -> InventoryResponse:
        profile = self.profiles.get_or_create(user_id)
        return InventoryResponse(
            badges=profile.badges,
            titles=profile.titles,
            power_ups=profile.power_up_inventory,
            equipped=_equipped(profile),
        )

    def equip(self, user_id: str, item_type: str, item_id: str) -> EquippedItems:
        """Equip an owned badge or title. Raises ItemNotOwnedError otherwise."""
        profile = self.profiles.get_or_create(user_id)

        if item_type == "badge":
            if item_id not in profile.badges:
                raise ItemNotOwnedError(item_type, item_id)
            profile.equipped_badge = item_id
        else:
            if item_id not in profile.titles:
                raise ItemNotOwnedError(item_type, item_id)
            profile.equipped_title = item_id

        self.profiles.save(profile)
        logger.info("User %s equipped %s %s", user_id, item_type, item_id)
        return _equipped(profile)

    def unequip(self, user_id: str, item_type: str) -> EquippedItems:
        profile = self.profiles.get_or_create(user_id)

        if item_type == "badge":
            profile.equipped_badge = None
        else:
            profile.equipped_title = None

        self.profiles.save(profile)
        return _equipped(profile)
