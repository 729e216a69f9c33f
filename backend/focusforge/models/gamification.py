"""
Gamification models: rewards, levels, power-ups, quests and achievements.

Covers:
- Catalog entries (power-ups, achievement definitions) - frozen
- Per-user state (active power-ups, quests, achievements, profile document)
- API request/response models
- Domain exceptions
"""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Enums
# =============================================================================


class PowerUpKind(str, Enum):
    """Which balance a power-up multiplies."""

    XP_BOOST = "xp_boost"
    COIN_BOOST = "coin_boost"
    ALL_BOOST = "all_boost"


class PowerUpSource(str, Enum):
    """How an inventory power-up was acquired."""

    PURCHASED = "purchased"
    LEVEL_REWARD = "level_reward"


class QuestType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class QuestDifficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuestStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"


class ConditionType(str, Enum):
    FOCUS_TIME = "focus_time"
    STREAK = "streak"
    CHALLENGES = "challenges"
    COLLABORATION = "collaboration"
    CUSTOM = "custom"


class NotificationType(str, Enum):
    LEVEL_UP = "level_up"
    STREAK = "streak"
    ACHIEVEMENT = "achievement"
    QUEST_COMPLETED = "quest_completed"


# =============================================================================
# Rewards & Levels
# =============================================================================


class Reward(BaseModel):
    """XP and coins earned from a single event."""

    xp: int = Field(default=0, ge=0)
    coins: int = Field(default=0, ge=0)


class NextLevelReward(BaseModel):
    """What the user receives on reaching the next level."""

    coins: int
    power_up_id: Optional[str] = None


class LevelInfo(BaseModel):
    """Level derived from lifetime XP (recomputed, never stored as truth)."""

    level: int = Field(ge=1)
    current_xp: int = Field(ge=0)
    required_xp: int = Field(gt=0)
    progress_percent: float = Field(ge=0, le=100)
    next_level_reward: NextLevelReward


class LevelUp(BaseModel):
    """A level reached during a credit, with the reward granted for it."""

    level: int
    reward: NextLevelReward


# =============================================================================
# Power-ups
# =============================================================================


class PowerUp(BaseModel):
    """Catalog entry. Immutable; identity is `id`."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    kind: PowerUpKind
    multiplier: float = Field(gt=1)
    duration_ms: int = Field(gt=0)
    cost: int = Field(ge=0)


class ActivePowerUp(PowerUp):
    """A catalog snapshot activated by a user, live until `expires_at`."""

    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


class InventoryPowerUp(BaseModel):
    """An owned, not yet activated power-up copy."""

    id: str
    acquired_at: datetime
    source: PowerUpSource = PowerUpSource.PURCHASED


# =============================================================================
# Quests
# =============================================================================


class QuestCondition(BaseModel):
    """Numeric goal. When min_focus_score is set, current counts qualifying sessions."""

    type: ConditionType
    target: float
    current: float = 0
    min_focus_score: Optional[float] = None


class QuestRewards(BaseModel):
    xp: int = Field(ge=0)
    coins: int = Field(ge=0)
    achievement: Optional[str] = None


class Quest(BaseModel):
    """A time-boxed goal owned by a user."""

    id: str
    name: str
    description: str
    type: QuestType
    difficulty: QuestDifficulty
    icon: Optional[str] = None
    conditions: list[QuestCondition] = Field(min_length=1)
    rewards: QuestRewards
    start_date: datetime
    end_date: datetime
    status: QuestStatus = QuestStatus.ACTIVE

    def is_expired(self, now: datetime) -> bool:
        return self.end_date < now


class QuestProgressResult(BaseModel):
    quest: Quest
    just_completed: bool


# =============================================================================
# Achievements
# =============================================================================


class AchievementReward(BaseModel):
    xp: int = Field(default=0, ge=0)
    badge: Optional[str] = None
    title: Optional[str] = None


class AchievementDefinition(BaseModel):
    """Catalog entry: unlocks when `getattr(stats, stat) >= threshold`."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    icon: str
    stat: Literal["total_focus_time", "weekly_streak", "best_session_score"]
    threshold: float
    reward: AchievementReward


class Achievement(BaseModel):
    """An unlocked achievement (append-only, one per id per user)."""

    id: str
    name: str
    description: str
    icon: str
    unlocked_at: datetime
    reward: Optional[AchievementReward] = None


class QuestSettlement(BaseModel):
    """What crediting a completed quest granted."""

    rewards: Reward
    level_ups: list[LevelUp] = Field(default_factory=list)
    achievement: Optional[Achievement] = None


class UserStats(BaseModel):
    """Lifetime statistics read by the achievement evaluator."""

    total_focus_time: int = 0  # seconds
    weekly_streak: int = 0
    best_session_score: float = 0
    session_count: int = 0


# =============================================================================
# Profile document
# =============================================================================


class GamificationProfile(BaseModel):
    """One user's gamification document (gamification_profiles row)."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    xp: int = 0
    coins: int = 0
    level: int = 1
    total_focus_time: int = 0
    session_count: int = 0
    average_session_score: float = 0
    best_session_score: float = 0
    weekly_streak: int = 0
    last_active: Optional[datetime] = None
    daily_quests_completed: int = 0
    weekly_quests_completed: int = 0
    badges: list[str] = Field(default_factory=list)
    titles: list[str] = Field(default_factory=list)
    equipped_badge: Optional[str] = None
    equipped_title: Optional[str] = None
    power_up_inventory: list[InventoryPowerUp] = Field(default_factory=list)
    active_power_ups: list[ActivePowerUp] = Field(default_factory=list)
    quests: list[Quest] = Field(default_factory=list)
    achievements: list[Achievement] = Field(default_factory=list)

    def to_stats(self) -> UserStats:
        return UserStats(
            total_focus_time=self.total_focus_time,
            weekly_streak=self.weekly_streak,
            best_session_score=self.best_session_score,
            session_count=self.session_count,
        )

    @property
    def unlocked_achievement_ids(self) -> set[str]:
        return {a.id for a in self.achievements}


class Notification(BaseModel):
    """User-facing event produced while applying progress."""

    type: NotificationType
    message: str
    rewards: Optional[Reward] = None
    achievement: Optional[Achievement] = None
    quest_id: Optional[str] = None


class SessionResult(BaseModel):
    """Aggregate outcome of applying one completed focus session."""

    rewards: Reward
    level: LevelInfo
    level_ups: list[LevelUp] = Field(default_factory=list)
    completed_quests: list[Quest] = Field(default_factory=list)
    new_achievements: list[Achievement] = Field(default_factory=list)
    notifications: list[Notification] = Field(default_factory=list)

    @property
    def leveled_up(self) -> bool:
        return bool(self.level_ups)


# =============================================================================
# Request Models
# =============================================================================


class SessionCompleteRequest(BaseModel):
    """Completed focus session reported by the client."""

    focus_score: float = Field(ge=0, le=100)
    duration_seconds: int = Field(ge=0, le=24 * 3600)


class PowerUpActionRequest(BaseModel):
    power_up_id: str = Field(min_length=1, max_length=64)


class QuestProgressRequest(BaseModel):
    progress: float = Field(ge=0)


class EquipRequest(BaseModel):
    item_type: Literal["badge", "title"]
    item_id: str = Field(min_length=1, max_length=100)


# =============================================================================
# Response Models
# =============================================================================


class ProfileStats(BaseModel):
    xp: int
    coins: int
    level: int
    total_focus_time: int
    session_count: int
    average_session_score: float
    weekly_streak: int


class SessionCompleteResponse(BaseModel):
    rewards: Reward
    leveled_up: bool
    level: LevelInfo
    level_ups: list[LevelUp]
    completed_quests: list[Quest]
    new_achievements: list[Achievement]
    notifications: list[Notification]
    stats: ProfileStats


class StatsResponse(BaseModel):
    level: LevelInfo
    stats: ProfileStats
    achievement_count: int
    total_quests_completed: int
    leaderboard_rank: int


class PowerUpsResponse(BaseModel):
    available: list[PowerUp]
    inventory: list[InventoryPowerUp]
    active: list[ActivePowerUp]
    coins: int


class QuestsResponse(BaseModel):
    quests: list[Quest]
    daily_completed: int = 0
    weekly_completed: int = 0


class QuestProgressResponse(BaseModel):
    quest: Quest
    just_completed: bool
    rewards: Optional[Reward] = None
    level: LevelInfo
    notifications: list[Notification] = Field(default_factory=list)


class EquippedItems(BaseModel):
    badge: Optional[str] = None
    title: Optional[str] = None


class InventoryResponse(BaseModel):
    badges: list[str]
    titles: list[str]
    power_ups: list[InventoryPowerUp]
    equipped: EquippedItems


class InsightsResponse(BaseModel):
    observations: list[str]
    recommendations: list[str]
    source: Literal["provider", "fallback"] = "fallback"


# =============================================================================
# Exceptions
# =============================================================================


class GamificationError(Exception):
    """Base exception for gamification errors."""

    pass


class QuestNotActiveError(GamificationError):
    """Progress was applied to a quest that is completed, failed or expired."""

    def __init__(self, quest_id: str, status: str):
        self.quest_id = quest_id
        self.status = status
        super().__init__(f"Quest {quest_id} is not active (status: {status})")


class QuestNotFoundError(GamificationError):
    def __init__(self, quest_id: str):
        self.quest_id = quest_id
        super().__init__(f"Quest not found: {quest_id}")


class PowerUpNotFoundError(GamificationError):
    """Unknown power-up id at the service boundary."""

    def __init__(self, power_up_id: str):
        self.power_up_id = power_up_id
        super().__init__(f"Unknown power-up: {power_up_id}")


class PowerUpNotInInventoryError(GamificationError):
    def __init__(self, power_up_id: str):
        self.power_up_id = power_up_id
        super().__init__(f"Power-up {power_up_id} is not in inventory")


class InsufficientCoinsError(GamificationError):
    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(f"Insufficient coins: required {required}, available {available}")


class ItemNotOwnedError(GamificationError):
    def __init__(self, item_type: str, item_id: str):
        self.item_type = item_type
        self.item_id = item_id
        super().__init__(f"You don't own this {item_type}: {item_id}")


class ProgressBusyError(GamificationError):
    """Another progress update for the same user is in flight."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"Progress update already in progress for user {user_id}")
