"""Pydantic models for FocusForge API."""

from focusforge.models.gamification import (
    Achievement,
    ActivePowerUp,
    GamificationError,
    GamificationProfile,
    InsufficientCoinsError,
    ItemNotOwnedError,
    LevelInfo,
    PowerUp,
    PowerUpKind,
    PowerUpNotFoundError,
    PowerUpNotInInventoryError,
    ProgressBusyError,
    Quest,
    QuestNotActiveError,
    QuestNotFoundError,
    QuestStatus,
    QuestType,
    Reward,
    UserStats,
)

__all__ = [
    # Domain models
    "Achievement",
    "ActivePowerUp",
    "GamificationProfile",
    "LevelInfo",
    "PowerUp",
    "PowerUpKind",
    "Quest",
    "QuestStatus",
    "QuestType",
    "Reward",
    "UserStats",
    # Exceptions
    "GamificationError",
    "InsufficientCoinsError",
    "ItemNotOwnedError",
    "PowerUpNotFoundError",
    "PowerUpNotInInventoryError",
    "ProgressBusyError",
    "QuestNotActiveError",
    "QuestNotFoundError",
]
