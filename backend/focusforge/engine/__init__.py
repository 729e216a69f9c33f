"""Pure gamification engine: rewards, levels, power-ups, quests and achievements."""

from focusforge.engine.achievements import ACHIEVEMENT_CATALOG, achievement_from_quest, evaluate
from focusforge.engine.levels import compute_level_info, level_for_xp
from focusforge.engine.powerups import PowerUpRegistry, activate, power_up_registry, prune_expired
from focusforge.engine.progression import apply_session, credit, settle_quest
from focusforge.engine.quest_generator import generate_daily, generate_weekly
from focusforge.engine.quest_progress import apply_progress
from focusforge.engine.rewards import compute_reward

__all__ = [
    "ACHIEVEMENT_CATALOG",
    "PowerUpRegistry",
    "achievement_from_quest",
    "activate",
    "apply_progress",
    "apply_session",
    "compute_level_info",
    "compute_reward",
    "credit",
    "evaluate",
    "generate_daily",
    "generate_weekly",
    "level_for_xp",
    "power_up_registry",
    "prune_expired",
    "settle_quest",
]
