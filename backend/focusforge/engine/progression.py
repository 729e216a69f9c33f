"""
Progression orchestration over a user's gamification profile.

Composes the reward, level, quest and achievement calculators. Every function
here mutates the in-memory GamificationProfile it is given and returns what
changed; persisting the profile is the caller's job. Callers must hold the
user's progress lock so only one update per user is applied at a time.
"""

from datetime import datetime
from typing import Optional

from focusforge.core.constants import (
    STREAK_MILESTONE_COINS_PER_DAY,
    STREAK_MILESTONE_INTERVAL,
    STREAK_MILESTONE_XP_PER_DAY,
)
from focusforge.engine.achievements import achievement_from_quest, evaluate
from focusforge.engine.levels import compute_level_info, level_for_xp, level_reward, levels_gained
from focusforge.engine.powerups import prune_expired
from focusforge.engine.quest_progress import apply_progress, session_progress
from focusforge.engine.rewards import compute_reward
from focusforge.models.gamification import (
    Achievement,
    GamificationProfile,
    InventoryPowerUp,
    LevelUp,
    Notification,
    NotificationType,
    PowerUpSource,
    Quest,
    QuestSettlement,
    QuestType,
    Reward,
    SessionResult,
)


def credit(profile: GamificationProfile, xp: int, coins: int, now: datetime) -> list[LevelUp]:
    """
    Add XP and coins, then grant the reward for every level crossed.

    Reaching level L pays (L - 1) * 100 coins, plus the milestone power-up
    into inventory when L is 5, 10, 15, 20 or 25.
    """
    old_xp = profile.xp
    profile.xp = max(old_xp + xp, 0)
    profile.coins = max(profile.coins + coins, 0)

    level_ups = []
    for level in levels_gained(old_xp, profile.xp):
        reward = level_reward(level - 1)
        profile.coins += reward.coins
        if reward.power_up_id:
            profile.power_up_inventory.append(
                InventoryPowerUp(
                    id=reward.power_up_id,
                    acquired_at=now,
                    source=PowerUpSource.LEVEL_REWARD,
                )
            )
        level_ups.append(LevelUp(level=level, reward=reward))

    profile.level = level_for_xp(profile.xp)
    return level_ups


def next_streak(last_active: Optional[datetime], now: datetime, current: int) -> int:
    """Consecutive day extends the streak, same day keeps it, a gap resets to 1."""
    if last_active is None:
        return 1
    if last_active.tzinfo is not None and now.tzinfo is not None:
        last_active = last_active.astimezone(now.tzinfo)

    days = (now.date() - last_active.date()).days
    if days == 0:
        return max(current, 1)
    if days == 1:
        return current + 1
    return 1


def grant_achievement(
    profile: GamificationProfile, achievement: Achievement, now: datetime
) -> list[LevelUp]:
    """Record an unlocked achievement and hand out its XP, badge and title."""
    profile.achievements.append(achievement)
    if achievement.reward is None:
        return []

    if achievement.reward.badge and achievement.reward.badge not in profile.badges:
        profile.badges.append(achievement.reward.badge)
    if achievement.reward.title and achievement.reward.title not in profile.titles:
        profile.titles.append(achievement.reward.title)
    return credit(profile, achievement.reward.xp, 0, now)


def settle_quest(profile: GamificationProfile, quest: Quest, now: datetime) -> QuestSettlement:
    """
    Credit a quest that just completed.

    Call exactly once, right after apply_progress() reported just_completed;
    the completed status then blocks any further progress on the quest.
    """
    rewards = Reward(xp=quest.rewards.xp, coins=quest.rewards.coins)
    level_ups = credit(profile, rewards.xp, rewards.coins, now)

    if quest.type == QuestType.DAILY:
        profile.daily_quests_completed += 1
    else:
        profile.weekly_quests_completed += 1

    achievement = achievement_from_quest(quest, profile.unlocked_achievement_ids, now)
    if achievement:
        level_ups += grant_achievement(profile, achievement, now)

    return QuestSettlement(rewards=rewards, level_ups=level_ups, achievement=achievement)


def quest_notifications(quest: Quest, settlement: QuestSettlement) -> list[Notification]:
    notifications = [
        Notification(
            type=NotificationType.QUEST_COMPLETED,
            message=f"Quest completed: {quest.name}!",
            rewards=settlement.rewards,
            quest_id=quest.id,
        )
    ]
    if settlement.achievement:
        notifications.append(achievement_notification(settlement.achievement))
    return notifications


def achievement_notification(achievement: Achievement) -> Notification:
    return Notification(
        type=NotificationType.ACHIEVEMENT,
        message=f"New Achievement Unlocked: {achievement.name}!",
        achievement=achievement,
    )


def level_up_notification(level_up: LevelUp) -> Notification:
    return Notification(
        type=NotificationType.LEVEL_UP,
        message=f"Congratulations! You've reached level {level_up.level}!",
        rewards=Reward(coins=level_up.reward.coins),
    )


def apply_session(
    profile: GamificationProfile,
    focus_score: float,
    duration_seconds: int,
    now: datetime,
) -> SessionResult:
    """
    Apply one completed focus session to the profile.

    Order:
    1. Prune expired power-ups, then compute the reward from the streak the
       user held before this session.
    2. Update lifetime stats and the daily streak, credit the reward.
    3. Advance session-driven quests and settle any that complete.
    4. Streak milestone bonus every 5 days, only when the streak advanced.
    5. Unlock threshold achievements.
    """
    profile.active_power_ups = prune_expired(profile.active_power_ups, now)
    rewards = compute_reward(
        focus_score, duration_seconds, profile.weekly_streak, profile.active_power_ups
    )

    previous_count = profile.session_count
    profile.average_session_score = round(
        (profile.average_session_score * previous_count + focus_score) / (previous_count + 1), 2
    )
    profile.session_count = previous_count + 1
    profile.total_focus_time += max(duration_seconds, 0)
    profile.best_session_score = max(profile.best_session_score, focus_score)

    previous_streak = profile.weekly_streak
    profile.weekly_streak = next_streak(profile.last_active, now, previous_streak)
    profile.last_active = now

    level_ups = credit(profile, rewards.xp, rewards.coins, now)
    notifications: list[Notification] = []

    completed_quests: list[Quest] = []
    new_achievements: list[Achievement] = []
    for quest in profile.quests:
        if quest.is_expired(now):
            continue
        progress = session_progress(quest, duration_seconds, focus_score)
        if progress is None:
            continue
        if not apply_progress(quest, progress).just_completed:
            continue

        settlement = settle_quest(profile, quest, now)
        level_ups += settlement.level_ups
        completed_quests.append(quest)
        if settlement.achievement:
            new_achievements.append(settlement.achievement)
        notifications += quest_notifications(quest, settlement)

    streak = profile.weekly_streak
    if streak > previous_streak and streak % STREAK_MILESTONE_INTERVAL == 0:
        bonus = Reward(
            xp=streak * STREAK_MILESTONE_XP_PER_DAY,
            coins=streak * STREAK_MILESTONE_COINS_PER_DAY,
        )
        level_ups += credit(profile, bonus.xp, bonus.coins, now)
        notifications.append(
            Notification(
                type=NotificationType.STREAK,
                message=f"Amazing! You've maintained a {streak} day streak!",
                rewards=bonus,
            )
        )

    for achievement in evaluate(profile.to_stats(), profile.unlocked_achievement_ids, now):
        level_ups += grant_achievement(profile, achievement, now)
        new_achievements.append(achievement)
        notifications.append(achievement_notification(achievement))

    notifications = [level_up_notification(lu) for lu in level_ups] + notifications

    return SessionResult(
        rewards=rewards,
        level=compute_level_info(profile.xp),
        level_ups=level_ups,
        completed_quests=completed_quests,
        new_achievements=new_achievements,
        notifications=notifications,
    )
