"""
AI productivity insights with a fixed fallback.

The text-generation provider is best effort: any transport, status or parse
failure is logged and the DEFAULT_INSIGHTS payload is returned instead.
Results are cached per user in Redis.
"""

import json
import logging
from typing import Optional, Protocol

import httpx

from focusforge.core.cache import cache_get, cache_set
from focusforge.core.config import get_settings
from focusforge.core.constants import INSIGHT_PROMPT_MAX_QUESTS
from focusforge.core.redis import GamificationKeys
from focusforge.engine.levels import compute_level_info
from focusforge.models.gamification import GamificationProfile, InsightsResponse
from focusforge.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

DEFAULT_INSIGHTS = InsightsResponse(
    observations=[
        "Regular work patterns detected",
        "Focus sessions average 45 minutes",
    ],
    recommendations=[
        "Try the Pomodoro Technique (25min work, 5min break)",
        "Schedule deep work during your peak energy hours",
        "Take regular breaks to maintain productivity",
    ],
    source="fallback",
)


class InsightProvider(Protocol):
    def generate(self, prompt: str) -> str: ...


class HttpInsightProvider:
    """Text-generation endpoint taking {"inputs": prompt} and returning generated_text."""

    def __init__(self, url: str, api_key: str = "", timeout: float = 15.0):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout

    def generate(self, prompt: str) -> str:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        with httpx.Client(timeout=self.timeout) as client:
            response = client.post(self.url, json={"inputs": prompt}, headers=headers)
            response.raise_for_status()
            data = response.json()

        if isinstance(data, list):
            data = data[0]
        return data["generated_text"]


def build_prompt(profile: GamificationProfile) -> str:
    level = compute_level_info(profile.xp)
    data = {
        "level": level.level,
        "total_focus_minutes": profile.total_focus_time // 60,
        "session_count": profile.session_count,
        "average_session_score": profile.average_session_score,
        "best_session_score": profile.best_session_score,
        "weekly_streak": profile.weekly_streak,
        "quests": [
            {"name": q.name, "status": q.status.value}
            for q in profile.quests[:INSIGHT_PROMPT_MAX_QUESTS]
        ],
    }
    return (
        "Analyze these productivity patterns and reply with a JSON object with "
        '"observations" and "recommendations" lists of short strings:\n'
        f"{json.dumps(data, indent=2)}"
    )


def parse_insights(text: str) -> InsightsResponse:
    """
    Extract the JSON object embedded in generated text.

    Raises ValueError when no usable object is found.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise ValueError("No JSON object in generated text")

    payload = json.loads(text[start : end + 1])
    observations = [str(o) for o in payload.get("observations", []) if o]
    recommendations = [str(r) for r in payload.get("recommendations", []) if r]
    if not observations and not recommendations:
        raise ValueError("Generated insights are empty")

    return InsightsResponse(
        observations=observations or DEFAULT_INSIGHTS.observations,
        recommendations=recommendations or DEFAULT_INSIGHTS.recommendations,
        source="provider",
    )


def default_provider() -> Optional[InsightProvider]:
    settings = get_settings()
    if not settings.insights_configured:
        return None
    return HttpInsightProvider(
        settings.insight_api_url,
        api_key=settings.insight_api_key,
        timeout=settings.insight_timeout_seconds,
    )


class InsightService:
    """Service for cached AI insights."""

    def __init__(
        self,
        provider: Optional[InsightProvider] = None,
        profiles: Optional[ProfileService] = None,
    ):
        self.provider = provider if provider is not None else default_provider()
        self.profiles = profiles or ProfileService()

    def get_insights(self, user_id: str) -> InsightsResponse:
        cached = cache_get(GamificationKeys.insights(user_id), InsightsResponse)
        if cached is not None:
            return cached
        return self.refresh_insights(user_id)

    def refresh_insights(self, user_id: str) -> InsightsResponse:
        """Regenerate and cache insights for a user."""
        profile = self.profiles.get_profile(user_id) or GamificationProfile(user_id=user_id)
        insights = self._generate(profile)

        cache_set(
            GamificationKeys.insights(user_id),
            insights,
            ttl=get_settings().insight_cache_ttl_seconds,
        )
        return insights

    def _generate(self, profile: GamificationProfile) -> InsightsResponse:
        if self.provider is None:
            return DEFAULT_INSIGHTS

        try:
            text = self.provider.generate(build_prompt(profile))
            return parse_insights(text)
        except httpx.HTTPError as e:
            logger.warning("Insight provider request failed for user %s: %s", profile.user_id, e)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning("Insight provider returned unusable output for %s: %s", profile.user_id, e)

        return DEFAULT_INSIGHTS
