"""Unit tests for PowerUpService.

Tests:
- get_power_ups() - catalog listing, expired power-ups pruned and saved
- purchase() - deducts cost, insufficient coins, unknown id
- use() - activates one copy, stacking, not in inventory
"""

from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
from conftest import NOW, make_profile

from focusforge.engine.powerups import POWER_UP_CATALOG, activate
from focusforge.models.gamification import (
    InsufficientCoinsError,
    InventoryPowerUp,
    PowerUpNotFoundError,
    PowerUpNotInInventoryError,
    PowerUpSource,
)
from focusforge.services.powerup_service import PowerUpService


@pytest.fixture
def service():
    """PowerUpService with a mocked profile store."""
    svc = PowerUpService(supabase=MagicMock())
    svc.profiles = MagicMock()
    return svc


@pytest.fixture(autouse=True)
def mock_capture():
    with patch("focusforge.services.powerup_service.capture") as capture:
        yield capture


def _owned(power_up_id: str) -> InventoryPowerUp:
    return InventoryPowerUp(id=power_up_id, acquired_at=NOW - timedelta(days=1))


# =============================================================================
# TestGetPowerUps
# =============================================================================


class TestGetPowerUps:
    @pytest.mark.unit
    def test_lists_catalog(self, service) -> None:
        service.profiles.get_or_create.return_value = make_profile(coins=120)

        result = service.get_power_ups("user-1", now=NOW)

        assert {p.id for p in result.available} == set(POWER_UP_CATALOG)
        assert result.coins == 120
        service.profiles.save.assert_not_called()

    @pytest.mark.unit
    def test_prunes_expired(self, service) -> None:
        expired = activate(POWER_UP_CATALOG["xp_boost_small"], NOW - timedelta(hours=2))
        live = activate(POWER_UP_CATALOG["coin_boost_small"], NOW - timedelta(minutes=10))
        profile = make_profile(active_power_ups=[expired, live])
        service.profiles.get_or_create.return_value = profile

        result = service.get_power_ups("user-1", now=NOW)

        assert [p.id for p in result.active] == ["coin_boost_small"]
        service.profiles.save.assert_called_once_with(profile)


# =============================================================================
# TestPurchase
# =============================================================================


class TestPurchase:
    @pytest.mark.unit
    def test_deducts_cost(self, service, mock_capture) -> None:
        profile = make_profile(coins=130)
        service.profiles.get_or_create.return_value = profile

        result = service.purchase("user-1", "xp_boost_small", now=NOW)

        assert result.coins == 30
        assert [p.id for p in result.inventory] == ["xp_boost_small"]
        assert result.inventory[0].source == PowerUpSource.PURCHASED
        service.profiles.save.assert_called_once_with(profile)
        assert mock_capture.call_args.args[1] == "power_up_purchased"

    @pytest.mark.unit
    def test_insufficient_coins(self, service) -> None:
        profile = make_profile(coins=99)
        service.profiles.get_or_create.return_value = profile

        with pytest.raises(InsufficientCoinsError) as exc_info:
            service.purchase("user-1", "xp_boost_small", now=NOW)

        assert exc_info.value.required == 100
        assert exc_info.value.available == 99
        assert profile.coins == 99
        assert profile.power_up_inventory == []
        service.profiles.save.assert_not_called()

    @pytest.mark.unit
    def test_unknown_power_up(self, service) -> None:
        with pytest.raises(PowerUpNotFoundError):
            service.purchase("user-1", "mega_boost", now=NOW)

        service.profiles.get_or_create.assert_not_called()


# =============================================================================
# TestUse
# =============================================================================


class TestUse:
    @pytest.mark.unit
    def test_activates_one_copy(self, service, mock_capture) -> None:
        profile = make_profile(
            power_up_inventory=[_owned("xp_boost_small"), _owned("xp_boost_small")]
        )
        service.profiles.get_or_create.return_value = profile

        result = service.use("user-1", "xp_boost_small", now=NOW)

        assert len(result.inventory) == 1
        assert len(result.active) == 1
        assert result.active[0].expires_at == NOW + timedelta(hours=1)
        service.profiles.save.assert_called_once_with(profile)
        assert mock_capture.call_args.args[1] == "power_up_activated"

    @pytest.mark.unit
    def test_copies_stack(self, service) -> None:
        already = activate(POWER_UP_CATALOG["xp_boost_small"], NOW - timedelta(minutes=5))
        profile = make_profile(
            power_up_inventory=[_owned("xp_boost_small")], active_power_ups=[already]
        )
        service.profiles.get_or_create.return_value = profile

        result = service.use("user-1", "xp_boost_small", now=NOW)

        assert [p.id for p in result.active] == ["xp_boost_small", "xp_boost_small"]

    @pytest.mark.unit
    def test_not_in_inventory(self, service) -> None:
        service.profiles.get_or_create.return_value = make_profile(
            power_up_inventory=[_owned("coin_boost_small")]
        )

        with pytest.raises(PowerUpNotInInventoryError):
            service.use("user-1", "xp_boost_small", now=NOW)

        service.profiles.save.assert_not_called()
