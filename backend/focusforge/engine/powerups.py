"""
Power-up catalog and lifecycle helpers.

The catalog is a read-only mapping built once at import. Activation produces a
new ActivePowerUp value; catalog entries are never mutated. Expiry is lazy:
callers run prune_expired() on every read that matters.
"""

from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from focusforge.models.gamification import ActivePowerUp, PowerUp, PowerUpKind

HOUR_MS = 60 * 60 * 1000

POWER_UP_CATALOG: Mapping[str, PowerUp] = MappingProxyType(
    {
        p.id: p
        for p in (
            PowerUp(
                id="xp_boost_small",
                name="Small XP Boost",
                description="Earn 50% more XP for 1 hour",
                kind=PowerUpKind.XP_BOOST,
                multiplier=1.5,
                duration_ms=HOUR_MS,
                cost=100,
            ),
            PowerUp(
                id="xp_boost_large",
                name="Large XP Boost",
                description="Double all XP earned for 2 hours",
                kind=PowerUpKind.XP_BOOST,
                multiplier=2.0,
                duration_ms=2 * HOUR_MS,
                cost=250,
            ),
            PowerUp(
                id="coin_boost_small",
                name="Small Coin Boost",
                description="Earn 50% more coins for 1 hour",
                kind=PowerUpKind.COIN_BOOST,
                multiplier=1.5,
                duration_ms=HOUR_MS,
                cost=150,
            ),
            PowerUp(
                id="coin_boost_large",
                name="Large Coin Boost",
                description="Double all coins earned for 2 hours",
                kind=PowerUpKind.COIN_BOOST,
                multiplier=2.0,
                duration_ms=2 * HOUR_MS,
                cost=300,
            ),
            PowerUp(
                id="all_boost",
                name="Ultimate Boost",
                description="Earn 75% more XP and coins for 1 hour",
                kind=PowerUpKind.ALL_BOOST,
                multiplier=1.75,
                duration_ms=HOUR_MS,
                cost=500,
            ),
        )
    }
)


class PowerUpRegistry:
    """Lookup over an immutable power-up catalog."""

    def __init__(self, catalog: Mapping[str, PowerUp] = POWER_UP_CATALOG):
        self._catalog = catalog

    def get(self, power_up_id: str) -> Optional[PowerUp]:
        """Return the catalog entry, or None for an unknown id."""
        return self._catalog.get(power_up_id)

    def list_all(self) -> list[PowerUp]:
        return list(self._catalog.values())


power_up_registry = PowerUpRegistry()


def activate(power_up: PowerUp, now: datetime) -> ActivePowerUp:
    """Snapshot a catalog entry into an active instance expiring after its duration."""
    return ActivePowerUp(
        **power_up.model_dump(),
        expires_at=now + timedelta(milliseconds=power_up.duration_ms),
    )


def prune_expired(active: Iterable[ActivePowerUp], now: datetime) -> list[ActivePowerUp]:
    """Drop instances with now > expires_at, keeping order."""
    return [p for p in active if not p.is_expired(now)]
