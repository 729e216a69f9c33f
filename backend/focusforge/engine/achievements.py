"""
Achievement evaluation.

Threshold achievements unlock when a lifetime stat reaches a value. Quest
achievements unlock when the quest that names them completes. Both are
one-shot: an id already unlocked is never returned again.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional

from focusforge.models.gamification import (
    Achievement,
    AchievementDefinition,
    AchievementReward,
    Quest,
    UserStats,
)

ACHIEVEMENT_CATALOG: tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        id="focus_master",
        name="Focus Master",
        description="Complete 60 minutes of focused work",
        icon="⏱️",
        stat="total_focus_time",
        threshold=3600,
        reward=AchievementReward(xp=500, badge="focus_master", title="The Focused"),
    ),
    AchievementDefinition(
        id="streak_warrior",
        name="Streak Warrior",
        description="Maintain a 7-day focus streak",
        icon="\U0001f525",
        stat="weekly_streak",
        threshold=7,
        reward=AchievementReward(xp=1000, badge="streak_warrior", title="The Consistent"),
    ),
    AchievementDefinition(
        id="perfectionist",
        name="Perfectionist",
        description="Complete a session with 95%+ focus score",
        icon="\U0001f3af",
        stat="best_session_score",
        threshold=95,
        reward=AchievementReward(xp=750, badge="perfectionist", title="The Precise"),
    ),
)

# Display names for achievements granted by quests (rewards come from the quest)
QUEST_ACHIEVEMENT_NAMES = {
    "streak_master": "Streak Master",
    "weekly_master": "Weekly Master",
    "team_player": "Team Player",
}


def _unlock(definition: AchievementDefinition, now: datetime) -> Achievement:
    return Achievement(
        id=definition.id,
        name=definition.name,
        description=definition.description,
        icon=definition.icon,
        unlocked_at=now,
        reward=definition.reward,
    )


def evaluate(
    stats: UserStats,
    already_unlocked_ids: Iterable[str],
    now: Optional[datetime] = None,
) -> list[Achievement]:
    """
    Return achievements newly satisfied by `stats`, in catalog order.

    Definitions whose id is in `already_unlocked_ids` are skipped, so
    re-evaluating the same stats after persisting the result returns [].
    """
    unlocked = set(already_unlocked_ids)
    now = now or datetime.now(timezone.utc)

    return [
        _unlock(definition, now)
        for definition in ACHIEVEMENT_CATALOG
        if definition.id not in unlocked
        and getattr(stats, definition.stat) >= definition.threshold
    ]


def achievement_from_quest(
    quest: Quest,
    already_unlocked_ids: Iterable[str],
    now: Optional[datetime] = None,
) -> Optional[Achievement]:
    """Achievement named by a completed quest, unless already unlocked."""
    achievement_id = quest.rewards.achievement
    if not achievement_id or achievement_id in set(already_unlocked_ids):
        return None

    return Achievement(
        id=achievement_id,
        name=QUEST_ACHIEVEMENT_NAMES.get(achievement_id, quest.name),
        description=quest.description,
        icon=quest.icon or "\U0001f3c6",
        unlocked_at=now or datetime.now(timezone.utc),
        reward=AchievementReward(badge=achievement_id),
    )
