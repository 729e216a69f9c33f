"""
Progression service: session completion, stats and level queries.

Handles:
- Applying a completed focus session (rewards, streak, quests, achievements)
- Lifetime stats with leaderboard rank
- Current level info
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from supabase import Client

from focusforge.core.posthog import (
    ACHIEVEMENT_UNLOCKED,
    LEVEL_REACHED,
    SESSION_COMPLETED,
    capture,
)
from focusforge.engine.levels import compute_level_info
from focusforge.engine.progression import apply_session
from focusforge.models.gamification import (
    LevelInfo,
    SessionCompleteRequest,
    SessionCompleteResponse,
    StatsResponse,
)
from focusforge.services.profile_service import ProfileService, to_profile_stats

logger = logging.getLogger(__name__)


class ProgressionService:
    """Service for applying sessions and reading progression state."""

    def __init__(self, supabase: Optional[Client] = None):
        self.profiles = ProfileService(supabase)

    def complete_session(
        self,
        user_id: str,
        request: SessionCompleteRequest,
        now: Optional[datetime] = None,
    ) -> SessionCompleteResponse:
        """
        Apply a completed session and persist the profile.

        Caller must hold the user's progress lock.
        """
        # UTC is the server's local time for streak days and quest boundaries
        now = now or datetime.now(timezone.utc)
        profile = self.profiles.get_or_create(user_id)

        result = apply_session(profile, request.focus_score, request.duration_seconds, now)
        self.profiles.save(profile)

        logger.info(
            "Session completed for user %s: +%d xp, +%d coins, level %d",
            user_id,
            result.rewards.xp,
            result.rewards.coins,
            result.level.level,
        )

        capture(
            user_id,
            SESSION_COMPLETED,
            {
                "focus_score": request.focus_score,
                "duration_seconds": request.duration_seconds,
                "xp": result.rewards.xp,
                "coins": result.rewards.coins,
                "weekly_streak": profile.weekly_streak,
            },
        )
        for level_up in result.level_ups:
            capture(user_id, LEVEL_REACHED, {"level": level_up.level})
        for achievement in result.new_achievements:
            capture(user_id, ACHIEVEMENT_UNLOCKED, {"achievement_id": achievement.id})

        return SessionCompleteResponse(
            rewards=result.rewards,
            leveled_up=result.leveled_up,
            level=result.level,
            level_ups=result.level_ups,
            completed_quests=result.completed_quests,
            new_achievements=result.new_achievements,
            notifications=result.notifications,
            stats=to_profile_stats(profile),
        )

    def get_stats(self, user_id: str) -> StatsResponse:
        profile = self.profiles.get_or_create(user_id)

        return StatsResponse(
            level=compute_level_info(profile.xp),
            stats=to_profile_stats(profile),
            achievement_count=len(profile.achievements),
            total_quests_completed=profile.daily_quests_completed
            + profile.weekly_quests_completed,
            leaderboard_rank=self.profiles.get_leaderboard_rank(profile),
        )

    def get_level(self, user_id: str) -> LevelInfo:
        profile = self.profiles.get_or_create(user_id)
        return compute_level_info(profile.xp)
