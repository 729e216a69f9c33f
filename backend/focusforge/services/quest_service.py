"""
Quest service.

Handles:
- Listing the user's quests, dropping expired ones and generating
  daily / weekly quests when none of that type remain
- Explicit progress updates (challenges, collaboration, custom goals)
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from supabase import Client

from focusforge.core.posthog import QUEST_COMPLETED, capture
from focusforge.engine.levels import compute_level_info
from focusforge.engine.progression import level_up_notification, quest_notifications, settle_quest
from focusforge.engine.quest_generator import (
    generate_daily,
    generate_weekly,
    needs_generation,
    unexpired,
)
from focusforge.engine.quest_progress import apply_progress
from focusforge.models.gamification import (
    QuestNotActiveError,
    QuestNotFoundError,
    QuestProgressResponse,
    QuestsResponse,
    QuestType,
)
from focusforge.services.profile_service import ProfileService

logger = logging.getLogger(__name__)


class QuestService:
    """Service for quest listing and progress."""

    def __init__(self, supabase: Optional[Client] = None):
        self.profiles = ProfileService(supabase)

    def get_quests(self, user_id: str, now: Optional[datetime] = None) -> QuestsResponse:
        # Server local time is UTC: days end at UTC midnight, weeks on Sunday UTC
        now = now or datetime.now(timezone.utc)
        profile = self.profiles.get_or_create(user_id)

        quests = unexpired(profile.quests, now)
        changed = len(quests) != len(profile.quests)

        if needs_generation(quests, QuestType.DAILY, now):
            quests += generate_daily(now, profile.weekly_streak)
            changed = True
        if needs_generation(quests, QuestType.WEEKLY, now):
            quests += generate_weekly(now)
            changed = True

        if changed:
            profile.quests = quests
            self.profiles.save(profile)

        return QuestsResponse(
            quests=profile.quests,
            daily_completed=profile.daily_quests_completed,
            weekly_completed=profile.weekly_quests_completed,
        )

    def update_progress(
        self,
        user_id: str,
        quest_id: str,
        progress: float,
        now: Optional[datetime] = None,
    ) -> QuestProgressResponse:
        """
        Set a quest's progress, crediting it if this completes it.

        Caller must hold the user's progress lock.

        Raises:
            QuestNotFoundError: no quest with this id
            QuestNotActiveError: quest is completed, failed or expired
        """
        now = now or datetime.now(timezone.utc)
        profile = self.profiles.get_or_create(user_id)

        quest = next((q for q in profile.quests if q.id == quest_id), None)
        if quest is None:
            raise QuestNotFoundError(quest_id)
        if quest.is_expired(now):
            raise QuestNotActiveError(quest.id, "expired")

        result = apply_progress(quest, progress)

        rewards = None
        notifications = []
        if result.just_completed:
            settlement = settle_quest(profile, quest, now)
            rewards = settlement.rewards
            notifications = [level_up_notification(lu) for lu in settlement.level_ups]
            notifications += quest_notifications(quest, settlement)

            logger.info("User %s completed quest %s", user_id, quest.id)
            capture(user_id, QUEST_COMPLETED, {"quest_id": quest.id, "quest_type": quest.type.value})

        self.profiles.save(profile)

        return QuestProgressResponse(
            quest=quest,
            just_completed=result.just_completed,
            rewards=rewards,
            level=compute_level_info(profile.xp),
            notifications=notifications,
        )
