"""
Quest progress tracking.

Only the first condition of a quest is read or written. The schema allows a
list, but multi-condition quests have no defined completion rule yet.
"""

from typing import Any, Optional

from focusforge.engine.rewards import coerce_number
from focusforge.models.gamification import (
    ConditionType,
    Quest,
    QuestNotActiveError,
    QuestProgressResult,
    QuestStatus,
)


def apply_progress(quest: Quest, new_current: Any) -> QuestProgressResult:
    """
    Set the quest's progress and complete it when the target is reached.

    Raises QuestNotActiveError (leaving the quest untouched) unless the quest
    is active. Since completion flips the status, a second call on the same
    quest is rejected: rewards can be issued at most once.
    """
    if quest.status != QuestStatus.ACTIVE:
        raise QuestNotActiveError(quest.id, quest.status.value)

    condition = quest.conditions[0]
    condition.current = max(coerce_number(new_current), 0.0)

    just_completed = condition.current >= condition.target
    if just_completed:
        quest.status = QuestStatus.COMPLETED

    return QuestProgressResult(quest=quest, just_completed=just_completed)


def session_progress(quest: Quest, duration_seconds: int, focus_score: float) -> Optional[float]:
    """
    New progress value a completed session gives this quest, or None.

    - focus_time: adds the session's minutes
    - conditions with min_focus_score: count sessions scoring at least that
    - other streak conditions: record the session's focus score
    - challenges / collaboration / custom: not driven by focus sessions
    """
    if quest.status != QuestStatus.ACTIVE or not quest.conditions:
        return None

    condition = quest.conditions[0]
    if condition.type == ConditionType.FOCUS_TIME:
        return condition.current + max(duration_seconds, 0) / 60
    if condition.min_focus_score is not None:
        if focus_score >= condition.min_focus_score:
            return condition.current + 1
        return None
    if condition.type == ConditionType.STREAK:
        return focus_score
    return None
