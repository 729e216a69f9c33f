"""
Session reward calculation.

Converts a completed focus session (score, duration, streak, active power-ups)
into an XP / coin reward. Pure: never raises for bad numbers, never touches
balances, never filters expired power-ups (callers prune first).
"""

import math
from typing import Any, Sequence

from focusforge.core.constants import (
    BASE_COINS_PER_MINUTE,
    BASE_XP_PER_MINUTE,
    DURATION_BONUSES,
    MAX_FOCUS_SCORE,
    QUALITY_BONUSES,
    STREAK_BONUS_CAP,
    STREAK_BONUS_PER_DAY,
)
from focusforge.models.gamification import PowerUp, PowerUpKind, Reward


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (112.5 -> 113)."""
    return int(math.floor(value + 0.5))


def coerce_number(value: Any) -> float:
    """Coerce to a finite float; anything else becomes 0."""
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def streak_bonus_fraction(streak_days: Any) -> float:
    streak = max(coerce_number(streak_days), 0.0)
    return min(streak * STREAK_BONUS_PER_DAY, STREAK_BONUS_CAP)


def compute_reward(
    focus_score: Any,
    duration_seconds: Any,
    streak_days: Any,
    active_power_ups: Sequence[PowerUp] = (),
) -> Reward:
    """
    Compute the reward for one completed session.

    Steps, each rounding half-up before the next:
    1. Base: 10 XP / 5 coins per minute, scaled by focus_score / 100.
    2. Streak bonus: +10% per streak day, capped at +50%.
    3. Quality bonus: >=95 -> +50/+25, else >=85 -> +25/+15.
    4. Duration milestone: >=1h -> +100/+50, else >=30min -> +50/+25.
    5. Power-ups, in list order. Each multiplies its target balance(s) and
       rounds immediately, so two active boosts compound sequentially.

    Example:
        compute_reward(90, 1500, 3, []) == Reward(xp=318, coins=162)
    """
    score = min(max(coerce_number(focus_score), 0.0), float(MAX_FOCUS_SCORE))
    duration = max(coerce_number(duration_seconds), 0.0)
    minutes = duration / 60

    xp = round_half_up((score / 100) * minutes * BASE_XP_PER_MINUTE)
    coins = round_half_up((score / 100) * minutes * BASE_COINS_PER_MINUTE)

    bonus = streak_bonus_fraction(streak_days)
    xp = round_half_up(xp * (1 + bonus))
    coins = round_half_up(coins * (1 + bonus))

    for tier in QUALITY_BONUSES:
        if score >= tier["min_score"]:
            xp += tier["xp"]
            coins += tier["coins"]
            break

    for milestone in DURATION_BONUSES:
        if duration >= milestone["min_seconds"]:
            xp += milestone["xp"]
            coins += milestone["coins"]
            break

    for power_up in active_power_ups:
        if power_up.kind in (PowerUpKind.XP_BOOST, PowerUpKind.ALL_BOOST):
            xp = round_half_up(xp * power_up.multiplier)
        if power_up.kind in (PowerUpKind.COIN_BOOST, PowerUpKind.ALL_BOOST):
            coins = round_half_up(coins * power_up.multiplier)

    return Reward(xp=max(xp, 0), coins=max(coins, 0))
