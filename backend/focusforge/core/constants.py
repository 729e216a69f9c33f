"""
Application constants for FocusForge.

Centralizes the reward, leveling and quest numbers. The values below are part
of the public contract with clients: changing them changes every user's level.
"""

APP_VERSION = "0.1.0"

# Leveling
XP_PER_LEVEL = 1000
LEVEL_MULTIPLIER = 1.5
LEVEL_REWARD_COINS_PER_LEVEL = 100

# Milestone level -> power-up granted on reaching it
LEVEL_MILESTONE_POWER_UPS = {
    5: "xp_boost_small",
    10: "coin_boost_small",
    15: "xp_boost_large",
    20: "coin_boost_large",
    25: "all_boost",
}

# Session rewards (per minute at a perfect focus score)
BASE_XP_PER_MINUTE = 10
BASE_COINS_PER_MINUTE = 5
MAX_FOCUS_SCORE = 100

# Streak bonus: +10% per streak day, capped at +50%
STREAK_BONUS_PER_DAY = 0.10
STREAK_BONUS_CAP = 0.50

# Quality bonuses, evaluated high to low (first match wins)
QUALITY_BONUSES = [
    {"min_score": 95, "xp": 50, "coins": 25},
    {"min_score": 85, "xp": 25, "coins": 15},
]

# Duration milestones, evaluated high to low (first match wins)
DURATION_BONUSES = [
    {"min_seconds": 3600, "xp": 100, "coins": 50},
    {"min_seconds": 1800, "xp": 50, "coins": 25},
]

# Streak milestone notification: every N days, streak * rate
STREAK_MILESTONE_INTERVAL = 5
STREAK_MILESTONE_XP_PER_DAY = 10
STREAK_MILESTONE_COINS_PER_DAY = 5

# Quests
DAILY_FOCUS_TARGET_MINUTES = 120
DAILY_CONSISTENCY_TARGET_SCORE = 80
SPECIAL_QUEST_MIN_WEEKLY_STREAK = 5
SPECIAL_QUEST_SESSIONS = 3
SPECIAL_QUEST_MIN_SCORE = 90
WEEKLY_FOCUS_TARGET_MINUTES = 600
WEEKLY_COLLABORATION_TARGET = 3

# Insights
INSIGHT_PROMPT_MAX_QUESTS = 5
