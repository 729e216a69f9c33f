"""
Power-up service for the catalog, purchases and activation.

Handles:
- Listing the catalog with the user's inventory and live power-ups
- Buying a power-up copy with coins
- Activating an owned copy (separately bought copies stack)
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from supabase import Client

from focusforge.core.posthog import POWER_UP_ACTIVATED, POWER_UP_PURCHASED, capture
from focusforge.engine.powerups import PowerUpRegistry, activate, power_up_registry, prune_expired
from focusforge.models.gamification import (
    GamificationProfile,
    InsufficientCoinsError,
    InventoryPowerUp,
    PowerUp,
    PowerUpNotFoundError,
    PowerUpNotInInventoryError,
    PowerUpSource,
    PowerUpsResponse,
)
from focusforge.services.profile_service import ProfileService

logger = logging.getLogger(__name__)


class PowerUpService:
    """Service for power-up purchase and activation."""

    def __init__(
        self,
        supabase: Optional[Client] = None,
        registry: PowerUpRegistry = power_up_registry,
    ):
        self.profiles = ProfileService(supabase)
        self.registry = registry

    def _lookup(self, power_up_id: str) -> PowerUp:
        power_up = self.registry.get(power_up_id)
        if power_up is None:
            raise PowerUpNotFoundError(power_up_id)
        return power_up

    def _to_response(self, profile: GamificationProfile) -> PowerUpsResponse:
        return PowerUpsResponse(
            available=self.registry.list_all(),
            inventory=profile.power_up_inventory,
            active=profile.active_power_ups,
            coins=profile.coins,
        )

    def get_power_ups(self, user_id: str, now: Optional[datetime] = None) -> PowerUpsResponse:
        """Catalog plus the user's state, dropping expired power-ups."""
        now = now or datetime.now(timezone.utc)
        profile = self.profiles.get_or_create(user_id)

        live = prune_expired(profile.active_power_ups, now)
        if len(live) != len(profile.active_power_ups):
            profile.active_power_ups = live
            self.profiles.save(profile)

        return self._to_response(profile)

    def purchase(
        self, user_id: str, power_up_id: str, now: Optional[datetime] = None
    ) -> PowerUpsResponse:
        """
        Buy one copy into inventory.

        Raises:
            PowerUpNotFoundError: unknown id
            InsufficientCoinsError: balance below the cost (nothing is deducted)
        """
        now = now or datetime.now(timezone.utc)
        power_up = self._lookup(power_up_id)
        profile = self.profiles.get_or_create(user_id)

        if profile.coins < power_up.cost:
            raise InsufficientCoinsError(required=power_up.cost, available=profile.coins)

        profile.coins -= power_up.cost
        profile.power_up_inventory.append(
            InventoryPowerUp(id=power_up.id, acquired_at=now, source=PowerUpSource.PURCHASED)
        )
        self.profiles.save(profile)

        logger.info("User %s bought %s for %d coins", user_id, power_up.id, power_up.cost)
        capture(user_id, POWER_UP_PURCHASED, {"power_up_id": power_up.id, "cost": power_up.cost})

        return self._to_response(profile)

    def use(self, user_id: str, power_up_id: str, now: Optional[datetime] = None) -> PowerUpsResponse:
        """
        Activate one owned copy.

        Raises:
            PowerUpNotFoundError: unknown id
            PowerUpNotInInventoryError: no copy owned
        """
        now = now or datetime.now(timezone.utc)
        power_up = self._lookup(power_up_id)
        profile = self.profiles.get_or_create(user_id)

        index = next(
            (i for i, owned in enumerate(profile.power_up_inventory) if owned.id == power_up_id),
            None,
        )
        if index is None:
            raise PowerUpNotInInventoryError(power_up_id)

        profile.power_up_inventory.pop(index)
        profile.active_power_ups = prune_expired(profile.active_power_ups, now)
        profile.active_power_ups.append(activate(power_up, now))
        self.profiles.save(profile)

        logger.info("User %s activated %s", user_id, power_up.id)
        capture(user_id, POWER_UP_ACTIVATED, {"power_up_id": power_up.id})

        return self._to_response(profile)
