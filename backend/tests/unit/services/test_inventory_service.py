"""Unit tests for InventoryService."""

from unittest.mock import MagicMock

import pytest
from conftest import NOW, make_profile

from focusforge.models.gamification import InventoryPowerUp, ItemNotOwnedError, PowerUpSource
from focusforge.services.inventory_service import InventoryService


@pytest.fixture
def service():
    """InventoryService with a mocked profile store."""
    svc = InventoryService(supabase=MagicMock())
    svc.profiles = MagicMock()
    return svc


class TestGetInventory:
    @pytest.mark.unit
    def test_lists_owned_items(self, service) -> None:
        owned = InventoryPowerUp(
            id="xp_boost_small", acquired_at=NOW, source=PowerUpSource.LEVEL_REWARD
        )
        service.profiles.get_or_create.return_value = make_profile(
            badges=["focus_master"],
            titles=["The Focused"],
            equipped_badge="focus_master",
            power_up_inventory=[owned],
        )

        result = service.get_inventory("user-1")

        assert result.badges == ["focus_master"]
        assert result.titles == ["The Focused"]
        assert result.power_ups[0].source == PowerUpSource.LEVEL_REWARD
        assert result.equipped.badge == "focus_master"
        assert result.equipped.title is None


class TestEquip:
    @pytest.mark.unit
    def test_equip_owned_badge(self, service) -> None:
        profile = make_profile(badges=["focus_master", "perfectionist"])
        service.profiles.get_or_create.return_value = profile

        result = service.equip("user-1", "badge", "perfectionist")

        assert result.badge == "perfectionist"
        assert profile.equipped_badge == "perfectionist"
        service.profiles.save.assert_called_once_with(profile)

    @pytest.mark.unit
    def test_equip_owned_title(self, service) -> None:
        service.profiles.get_or_create.return_value = make_profile(titles=["The Precise"])

        result = service.equip("user-1", "title", "The Precise")

        assert result.title == "The Precise"

    @pytest.mark.unit
    def test_unowned_item_rejected(self, service) -> None:
        profile = make_profile(badges=["focus_master"])
        service.profiles.get_or_create.return_value = profile

        with pytest.raises(ItemNotOwnedError) as exc_info:
            service.equip("user-1", "badge", "streak_warrior")

        assert exc_info.value.item_id == "streak_warrior"
        assert profile.equipped_badge is None
        service.profiles.save.assert_not_called()


class TestUnequip:
    @pytest.mark.unit
    def test_clears_slot(self, service) -> None:
        profile = make_profile(
            badges=["focus_master"],
            titles=["The Focused"],
            equipped_badge="focus_master",
            equipped_title="The Focused",
        )
        service.profiles.get_or_create.return_value = profile

        result = service.unequip("user-1", "title")

        assert result.title is None
        assert result.badge == "focus_master"
        service.profiles.save.assert_called_once_with(profile)
