"""
Level calculation from lifetime XP.

The XP needed to go from level n to n+1 is round(1000 * 1.5 ** (n - 1)), so
thresholds are 0, 1000, 2500, 4750, 8125, ... Levels are never stored as the
source of truth; they are recomputed from total XP on demand.
"""

from typing import Any, Optional

from focusforge.core.constants import (
    LEVEL_MILESTONE_POWER_UPS,
    LEVEL_MULTIPLIER,
    LEVEL_REWARD_COINS_PER_LEVEL,
    XP_PER_LEVEL,
)
from focusforge.engine.rewards import coerce_number, round_half_up
from focusforge.models.gamification import LevelInfo, NextLevelReward


def xp_required_for_level(level: int) -> int:
    """XP needed to advance from `level` to `level + 1`."""
    return round_half_up(XP_PER_LEVEL * LEVEL_MULTIPLIER ** (max(level, 1) - 1))


def xp_threshold_for_level(level: int) -> int:
    """Cumulative XP at which `level` starts (level 1 starts at 0)."""
    return sum(xp_required_for_level(n) for n in range(1, max(level, 1)))


def milestone_power_up(level: int) -> Optional[str]:
    """Power-up granted on reaching `level`, if it is a milestone."""
    return LEVEL_MILESTONE_POWER_UPS.get(level)


def level_reward(level: int) -> NextLevelReward:
    """Reward for reaching `level + 1` while at `level`."""
    return NextLevelReward(
        coins=level * LEVEL_REWARD_COINS_PER_LEVEL,
        power_up_id=milestone_power_up(level + 1),
    )


def compute_level_info(total_xp: Any) -> LevelInfo:
    total = int(max(coerce_number(total_xp), 0.0))

    level = 1
    accumulated = 0
    xp_for_next = XP_PER_LEVEL
    while total >= accumulated + xp_for_next:
        accumulated += xp_for_next
        level += 1
        xp_for_next = xp_required_for_level(level)

    current_xp = total - accumulated
    return LevelInfo(
        level=level,
        current_xp=current_xp,
        required_xp=xp_for_next,
        progress_percent=current_xp / xp_for_next * 100,
        next_level_reward=level_reward(level),
    )


def level_for_xp(total_xp: Any) -> int:
    return compute_level_info(total_xp).level


def levels_gained(old_xp: int, new_xp: int) -> list[int]:
    """Levels newly reached when total XP moves from old_xp to new_xp."""
    old_level = level_for_xp(old_xp)
    new_level = level_for_xp(new_xp)
    return list(range(old_level + 1, new_level + 1))
