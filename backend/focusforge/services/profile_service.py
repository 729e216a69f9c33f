"""
Gamification profile storage.

One row per user in gamification_profiles. Nested state (inventory, active
power-ups, quests, achievements) lives in jsonb columns and round-trips
through GamificationProfile.
"""

import logging
from typing import Optional

from supabase import Client

from focusforge.core.database import get_supabase
from focusforge.models.gamification import GamificationProfile, ProfileStats

logger = logging.getLogger(__name__)

PROFILES_TABLE = "gamification_profiles"


def to_profile_stats(profile: GamificationProfile) -> ProfileStats:
    return ProfileStats(
        xp=profile.xp,
        coins=profile.coins,
        level=profile.level,
        total_focus_time=profile.total_focus_time,
        session_count=profile.session_count,
        average_session_score=profile.average_session_score,
        weekly_streak=profile.weekly_streak,
    )


class ProfileService:
    """Service for loading and saving gamification profiles."""

    def __init__(self, supabase: Optional[Client] = None):
        self._supabase = supabase

    @property
    def supabase(self) -> Client:
        if self._supabase is None:
            self._supabase = get_supabase()
        return self._supabase

    def get_profile(self, user_id: str) -> Optional[GamificationProfile]:
        result = self.supabase.table(PROFILES_TABLE).select("*").eq("user_id", user_id).execute()

        if not result.data:
            return None

        return GamificationProfile(**result.data[0])

    def get_or_create(self, user_id: str) -> GamificationProfile:
        """Load the user's profile, creating an empty one on first use."""
        profile = self.get_profile(user_id)
        if profile is not None:
            return profile

        profile = GamificationProfile(user_id=user_id)
        self.supabase.table(PROFILES_TABLE).insert(profile.model_dump(mode="json")).execute()
        logger.info("Created gamification profile for user %s", user_id)
        return profile

    def save(self, profile: GamificationProfile) -> None:
        """Persist the whole document. Caller must hold the user's progress lock."""
        data = profile.model_dump(mode="json", exclude={"user_id"})
        self.supabase.table(PROFILES_TABLE).update(data).eq("user_id", profile.user_id).execute()

    def get_leaderboard_rank(self, profile: GamificationProfile) -> int:
        """1-based rank by lifetime focus time."""
        result = (
            self.supabase.table(PROFILES_TABLE)
            .select("user_id", count="exact")
            .gt("total_focus_time", profile.total_focus_time)
            .execute()
        )
        ahead = result.count if result.count else 0
        return ahead + 1
