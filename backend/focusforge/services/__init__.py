"""Business logic services for FocusForge API."""

from focusforge.services.insight_service import InsightService
from focusforge.services.inventory_service import InventoryService
from focusforge.services.powerup_service import PowerUpService
from focusforge.services.profile_service import ProfileService
from focusforge.services.progression_service import ProgressionService
from focusforge.services.quest_service import QuestService

__all__ = [
    "InsightService",
    "InventoryService",
    "PowerUpService",
    "ProfileService",
    "ProgressionService",
    "QuestService",
]
