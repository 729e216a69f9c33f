"""Unit tests for progression orchestration.

Tests:
- credit() - balances, level-up coin rewards, milestone power-ups
- next_streak() - consecutive day, same day, gap
- settle_quest() - quest rewards, counters, quest achievements
- apply_session() - full session flow incl. quests, streak bonus, achievements
"""

from datetime import timedelta

import pytest
from conftest import NOW, make_profile, make_quest

from focusforge.engine.progression import apply_session, credit, next_streak, settle_quest
from focusforge.engine.quest_progress import apply_progress
from focusforge.models.gamification import (
    NotificationType,
    PowerUpSource,
    QuestStatus,
    QuestType,
    Reward,
)

# =============================================================================
# credit()
# =============================================================================


class TestCredit:
    @pytest.mark.unit
    def test_adds_balances_without_level_change(self) -> None:
        profile = make_profile()

        level_ups = credit(profile, 500, 40, NOW)

        assert level_ups == []
        assert (profile.xp, profile.coins, profile.level) == (500, 40, 1)

    @pytest.mark.unit
    def test_level_up_pays_previous_level_times_hundred(self) -> None:
        profile = make_profile()

        level_ups = credit(profile, 2500, 0, NOW)

        assert [lu.level for lu in level_ups] == [2, 3]
        assert [lu.reward.coins for lu in level_ups] == [100, 200]
        assert profile.coins == 300
        assert profile.level == 3

    @pytest.mark.unit
    def test_milestone_level_grants_power_up(self) -> None:
        profile = make_profile(xp=8000)

        level_ups = credit(profile, 125, 0, NOW)

        assert [lu.level for lu in level_ups] == [5]
        assert level_ups[0].reward.power_up_id == "xp_boost_small"
        assert profile.coins == 400
        assert len(profile.power_up_inventory) == 1
        assert profile.power_up_inventory[0].id == "xp_boost_small"
        assert profile.power_up_inventory[0].source == PowerUpSource.LEVEL_REWARD

    @pytest.mark.unit
    def test_balances_never_negative(self) -> None:
        profile = make_profile(xp=10, coins=5)

        credit(profile, -100, -100, NOW)

        assert (profile.xp, profile.coins) == (0, 0)


# =============================================================================
# next_streak()
# =============================================================================


class TestNextStreak:
    @pytest.mark.unit
    def test_first_session(self) -> None:
        assert next_streak(None, NOW, 0) == 1

    @pytest.mark.unit
    def test_consecutive_day_extends(self) -> None:
        assert next_streak(NOW - timedelta(days=1), NOW, 3) == 4

    @pytest.mark.unit
    def test_same_day_keeps(self) -> None:
        assert next_streak(NOW - timedelta(hours=2), NOW, 3) == 3

    @pytest.mark.unit
    def test_gap_resets(self) -> None:
        assert next_streak(NOW - timedelta(days=3), NOW, 6) == 1


# =============================================================================
# settle_quest()
# =============================================================================


class TestSettleQuest:
    @pytest.mark.unit
    def test_credits_rewards_and_counts_daily(self) -> None:
        profile = make_profile()
        quest = make_quest(xp=100, coins=50)

        settlement = settle_quest(profile, quest, NOW)

        assert settlement.rewards == Reward(xp=100, coins=50)
        assert settlement.achievement is None
        assert (profile.xp, profile.coins) == (100, 50)
        assert profile.daily_quests_completed == 1
        assert profile.weekly_quests_completed == 0

    @pytest.mark.unit
    def test_weekly_quest_with_achievement(self) -> None:
        profile = make_profile()
        quest = make_quest(
            quest_id="weekly-focus-2025-01-13",
            quest_type=QuestType.WEEKLY,
            xp=500,
            coins=250,
            achievement="weekly_master",
        )

        settlement = settle_quest(profile, quest, NOW)

        assert settlement.achievement.id == "weekly_master"
        assert profile.weekly_quests_completed == 1
        assert "weekly_master" in profile.unlocked_achievement_ids
        assert "weekly_master" in profile.badges

    @pytest.mark.unit
    def test_quest_achievement_granted_once(self) -> None:
        profile = make_profile()
        settle_quest(profile, make_quest(achievement="streak_master"), NOW)

        settlement = settle_quest(
            profile, make_quest(quest_id="daily-special-2025-01-16", achievement="streak_master"), NOW
        )

        assert settlement.achievement is None
        assert [a.id for a in profile.achievements] == ["streak_master"]


# =============================================================================
# apply_session()
# =============================================================================


class TestApplySession:
    @pytest.mark.unit
    def test_first_session(self) -> None:
        """Streak 0 before the session: 225 + 25 xp, 113 + 15 coins."""
        profile = make_profile()

        result = apply_session(profile, 90, 1500, NOW)

        assert result.rewards == Reward(xp=250, coins=128)
        assert (profile.xp, profile.coins) == (250, 128)
        assert profile.session_count == 1
        assert profile.total_focus_time == 1500
        assert profile.average_session_score == 90
        assert profile.best_session_score == 90
        assert profile.weekly_streak == 1
        assert profile.last_active == NOW
        assert result.leveled_up is False
        assert result.level.level == 1

    @pytest.mark.unit
    def test_reward_uses_streak_held_before_session(self) -> None:
        profile = make_profile(weekly_streak=3, last_active=NOW - timedelta(days=1))

        result = apply_session(profile, 90, 1500, NOW)

        assert result.rewards == Reward(xp=318, coins=162)
        assert profile.weekly_streak == 4

    @pytest.mark.unit
    def test_running_average(self) -> None:
        profile = make_profile(session_count=3, average_session_score=80)

        apply_session(profile, 60, 600, NOW)

        assert profile.average_session_score == 75

    @pytest.mark.unit
    def test_prunes_expired_power_ups_before_reward(self) -> None:
        from focusforge.engine.powerups import activate, power_up_registry

        expired = activate(power_up_registry.get("xp_boost_large"), NOW - timedelta(hours=3))
        profile = make_profile(active_power_ups=[expired])

        result = apply_session(profile, 90, 1500, NOW)

        assert profile.active_power_ups == []
        assert result.rewards.xp == 250

    @pytest.mark.unit
    def test_level_up_notification_first(self) -> None:
        profile = make_profile(xp=900)

        result = apply_session(profile, 90, 1500, NOW)

        assert [lu.level for lu in result.level_ups] == [2]
        assert result.leveled_up is True
        assert result.notifications[0].type == NotificationType.LEVEL_UP
        assert result.notifications[0].rewards == Reward(coins=100)
        assert profile.coins == 128 + 100

    @pytest.mark.unit
    def test_streak_milestone_bonus(self) -> None:
        profile = make_profile(weekly_streak=4, last_active=NOW - timedelta(days=1))

        result = apply_session(profile, 50, 600, NOW)

        assert profile.weekly_streak == 5
        streak = [n for n in result.notifications if n.type == NotificationType.STREAK]
        assert len(streak) == 1
        assert streak[0].rewards == Reward(xp=50, coins=25)
        assert profile.xp == result.rewards.xp + 50
        assert profile.coins == result.rewards.coins + 25

    @pytest.mark.unit
    def test_no_streak_bonus_when_streak_unchanged(self) -> None:
        profile = make_profile(weekly_streak=5, last_active=NOW - timedelta(hours=1))

        result = apply_session(profile, 50, 600, NOW)

        assert profile.weekly_streak == 5
        assert not [n for n in result.notifications if n.type == NotificationType.STREAK]

    @pytest.mark.unit
    def test_unlocks_achievement_once(self) -> None:
        profile = make_profile()

        first = apply_session(profile, 96, 600, NOW)
        second = apply_session(profile, 97, 600, NOW + timedelta(minutes=30))

        assert [a.id for a in first.new_achievements] == ["perfectionist"]
        assert second.new_achievements == []
        assert profile.titles == ["The Precise"]
        assert profile.badges == ["perfectionist"]
        assert profile.xp == first.rewards.xp + 750 + second.rewards.xp

    @pytest.mark.unit
    def test_completes_focus_quest(self) -> None:
        quest = make_quest(target=120, current=100, xp=100, coins=50)
        profile = make_profile(quests=[quest])

        result = apply_session(profile, 90, 1500, NOW)

        settled = profile.quests[0]
        assert settled.status == QuestStatus.COMPLETED
        assert [q.id for q in result.completed_quests] == [settled.id]
        assert profile.daily_quests_completed == 1
        assert (profile.xp, profile.coins) == (250 + 100, 128 + 50)
        assert any(n.type == NotificationType.QUEST_COMPLETED for n in result.notifications)

    @pytest.mark.unit
    def test_partial_quest_progress_persists_on_profile(self) -> None:
        profile = make_profile(quests=[make_quest(target=120)])

        result = apply_session(profile, 90, 1500, NOW)

        assert result.completed_quests == []
        assert profile.quests[0].conditions[0].current == pytest.approx(25)

    @pytest.mark.unit
    def test_expired_and_completed_quests_untouched(self) -> None:
        expired = make_quest(quest_id="daily-focus-old", end_date=NOW - timedelta(hours=1))
        done = make_quest(quest_id="daily-focus-done", target=10)
        apply_progress(done, 10)
        profile = make_profile(quests=[expired, done])

        apply_session(profile, 90, 1500, NOW)

        assert profile.quests[0].conditions[0].current == 0
        assert profile.quests[1].conditions[0].current == 10
        assert profile.daily_quests_completed == 0
