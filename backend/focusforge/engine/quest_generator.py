"""
Daily and weekly quest generation.

Quest ids are derived from the calendar date (daily) or the Monday of the
week (weekly), so generating twice in the same period yields the same ids.
Dates are computed in the timezone carried by `now`.

Generation policy belongs to the caller: only generate a type when the user
holds zero unexpired quests of that type (see needs_generation()).
"""

from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

from focusforge.core.constants import (
    DAILY_CONSISTENCY_TARGET_SCORE,
    DAILY_FOCUS_TARGET_MINUTES,
    SPECIAL_QUEST_MIN_SCORE,
    SPECIAL_QUEST_MIN_WEEKLY_STREAK,
    SPECIAL_QUEST_SESSIONS,
    WEEKLY_COLLABORATION_TARGET,
    WEEKLY_FOCUS_TARGET_MINUTES,
)
from focusforge.models.gamification import (
    ConditionType,
    Quest,
    QuestCondition,
    QuestDifficulty,
    QuestRewards,
    QuestType,
)

END_OF_DAY = time(23, 59, 59, 999000)


def next_midnight(now: datetime) -> datetime:
    return datetime.combine(now.date() + timedelta(days=1), time.min, tzinfo=now.tzinfo)


def week_start(now: datetime) -> date:
    """Monday of the week containing `now`."""
    today = now.date()
    return today - timedelta(days=today.weekday())


def end_of_week(now: datetime) -> datetime:
    """Sunday 23:59:59.999 of the current week."""
    sunday = week_start(now) + timedelta(days=6)
    return datetime.combine(sunday, END_OF_DAY, tzinfo=now.tzinfo)


def generate_daily(now: datetime, weekly_streak: int = 0) -> list[Quest]:
    day = now.date().isoformat()
    end = next_midnight(now)

    quests = [
        Quest(
            id=f"daily-focus-{day}",
            name="Daily Focus Challenge",
            description="Complete 2 hours of focused work today",
            type=QuestType.DAILY,
            difficulty=QuestDifficulty.EASY,
            icon="⏱️",
            conditions=[
                QuestCondition(type=ConditionType.FOCUS_TIME, target=DAILY_FOCUS_TARGET_MINUTES)
            ],
            rewards=QuestRewards(xp=100, coins=50),
            start_date=now,
            end_date=end,
        ),
        Quest(
            id=f"daily-consistency-{day}",
            name="Consistency Champion",
            description="Maintain a focus score above 80% today",
            type=QuestType.DAILY,
            difficulty=QuestDifficulty.MEDIUM,
            icon="\U0001f3af",
            conditions=[
                QuestCondition(type=ConditionType.STREAK, target=DAILY_CONSISTENCY_TARGET_SCORE)
            ],
            rewards=QuestRewards(xp=150, coins=75),
            start_date=now,
            end_date=end,
        ),
    ]

    if weekly_streak >= SPECIAL_QUEST_MIN_WEEKLY_STREAK:
        quests.append(
            Quest(
                id=f"daily-special-{day}",
                name="Streak Master",
                description="Complete 3 focus sessions with 90%+ focus score",
                type=QuestType.DAILY,
                difficulty=QuestDifficulty.HARD,
                icon="\U0001f525",
                conditions=[
                    QuestCondition(
                        type=ConditionType.STREAK,
                        target=SPECIAL_QUEST_SESSIONS,
                        min_focus_score=SPECIAL_QUEST_MIN_SCORE,
                    )
                ],
                rewards=QuestRewards(xp=250, coins=100, achievement="streak_master"),
                start_date=now,
                end_date=end,
            )
        )

    return quests


def generate_weekly(now: datetime) -> list[Quest]:
    week = week_start(now).isoformat()
    end = end_of_week(now)

    return [
        Quest(
            id=f"weekly-focus-{week}",
            name="Weekly Focus Master",
            description="Complete 10 hours of focused work this week",
            type=QuestType.WEEKLY,
            difficulty=QuestDifficulty.MEDIUM,
            icon="⭐",
            conditions=[
                QuestCondition(type=ConditionType.FOCUS_TIME, target=WEEKLY_FOCUS_TARGET_MINUTES)
            ],
            rewards=QuestRewards(xp=500, coins=250, achievement="weekly_master"),
            start_date=now,
            end_date=end,
        ),
        Quest(
            id=f"weekly-collaboration-{week}",
            name="Team Player",
            description="Participate in 3 team challenges",
            type=QuestType.WEEKLY,
            difficulty=QuestDifficulty.HARD,
            icon="\U0001f465",
            conditions=[
                QuestCondition(
                    type=ConditionType.COLLABORATION, target=WEEKLY_COLLABORATION_TARGET
                )
            ],
            rewards=QuestRewards(xp=750, coins=375, achievement="team_player"),
            start_date=now,
            end_date=end,
        ),
    ]


def unexpired(
    quests: Iterable[Quest], now: datetime, quest_type: Optional[QuestType] = None
) -> list[Quest]:
    """Quests whose end_date has not passed, optionally of one type."""
    return [
        q
        for q in quests
        if not q.is_expired(now) and (quest_type is None or q.type == quest_type)
    ]


def needs_generation(quests: Iterable[Quest], quest_type: QuestType, now: datetime) -> bool:
    return not unexpired(quests, now, quest_type)
