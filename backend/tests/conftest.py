"""Shared pytest fixtures for test suite."""

import os

# Settings are read at import time by several core modules
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from datetime import datetime, timedelta, timezone  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402

from focusforge.core.identity import Caller  # noqa: E402
from focusforge.models.gamification import (  # noqa: E402
    ConditionType,
    GamificationProfile,
    Quest,
    QuestCondition,
    QuestDifficulty,
    QuestRewards,
    QuestType,
)

# Wednesday, mid-afternoon UTC
NOW = datetime(2025, 1, 15, 14, 30, tzinfo=timezone.utc)


# =============================================================================
# Time Fixtures
# =============================================================================


@pytest.fixture
def now() -> datetime:
    """Fixed 'current time' shared by engine and service tests."""
    return NOW


# =============================================================================
# Profile & Quest Factories
# =============================================================================


def make_profile(**overrides) -> GamificationProfile:
    """Build a profile for user-1 with field overrides."""
    data = {"user_id": "user-1"}
    data.update(overrides)
    return GamificationProfile(**data)


def make_quest(
    quest_id: str = "daily-focus-2025-01-15",
    condition_type: ConditionType = ConditionType.FOCUS_TIME,
    target: float = 120,
    current: float = 0,
    quest_type: QuestType = QuestType.DAILY,
    end_date: datetime = NOW + timedelta(hours=8),
    xp: int = 100,
    coins: int = 50,
    achievement=None,
    min_focus_score=None,
) -> Quest:
    """Build a single-condition quest."""
    return Quest(
        id=quest_id,
        name="Test Quest",
        description="A quest for testing",
        type=quest_type,
        difficulty=QuestDifficulty.EASY,
        conditions=[
            QuestCondition(
                type=condition_type,
                target=target,
                current=current,
                min_focus_score=min_focus_score,
            )
        ],
        rewards=QuestRewards(xp=xp, coins=coins, achievement=achievement),
        start_date=NOW - timedelta(hours=1),
        end_date=end_date,
    )


@pytest.fixture
def profile() -> GamificationProfile:
    """Fresh profile with no progress."""
    return make_profile()


# =============================================================================
# Mock Request Fixtures
# =============================================================================


@pytest.fixture
def mock_request() -> MagicMock:
    """Mocked FastAPI Request object."""
    request = MagicMock()
    request.state = MagicMock()
    request.headers = {}
    return request


@pytest.fixture
def caller() -> Caller:
    """Caller identified by the gateway header."""
    return Caller(user_id="user-1")
