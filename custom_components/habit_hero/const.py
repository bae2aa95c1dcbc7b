# File: const.py
"""Constants for the Habit Hero integration.

This file centralizes storage keys, document field names, game rules, service
names, event names and platform identifiers for consistency across the
integration.

Document field names keep the camelCase interchange format of the Habit Hero
web app so exported files stay compatible with it.
"""

import logging
from typing import Final

from homeassistant.const import Platform

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
HABIT_HERO_TITLE = "Habit Hero"

# Integration Domain
DOMAIN = "habit_hero"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.SENSOR,
]

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORE = "store"
STORAGE_KEY = "habit_hero_data"
STORAGE_VERSION = 1

# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_SEED_DEFAULT_HABITS = "seed_default_habits"
DEFAULT_SEED_DEFAULT_HABITS = True

# ------------------------------------------------------------------------------------------------
# Document Keys (AppDocument)
# ------------------------------------------------------------------------------------------------
DATA_HABITS = "habits"
DATA_MOODS = "moods"
DATA_USER_STATS = "userStats"
DATA_LAST_UPDATED = "lastUpdated"
DATA_UNLOCKED_ACHIEVEMENTS = "unlockedAchievements"

# HabitRecord
DATA_HABIT_ID = "id"
DATA_HABIT_NAME = "name"
DATA_HABIT_EMOJI = "emoji"
DATA_HABIT_CATEGORY = "category"
DATA_HABIT_TARGET = "target"
DATA_HABIT_STREAK = "streak"
DATA_HABIT_TOTAL_COMPLETED = "totalCompleted"
DATA_HABIT_LAST_COMPLETED = "lastCompleted"
DATA_HABIT_PREVIOUS_COMPLETED = "previousCompleted"

# Fields a habit update may touch (never the completion counters)
HABIT_MUTABLE_FIELDS: Final[tuple[str, ...]] = (
    DATA_HABIT_NAME,
    DATA_HABIT_EMOJI,
    DATA_HABIT_CATEGORY,
    DATA_HABIT_TARGET,
)

# MoodEntry
DATA_MOOD_DATE = "date"
DATA_MOOD_MOOD = "mood"
DATA_MOOD_NOTE = "note"

# UserStats
DATA_STATS_LEVEL = "level"
DATA_STATS_XP = "xp"
DATA_STATS_XP_TO_NEXT = "xpToNext"
DATA_STATS_TOTAL_XP = "totalXP"
DATA_STATS_BADGES = "badges"
DATA_STATS_JOIN_DATE = "joinDate"

# ------------------------------------------------------------------------------------------------
# Habit Defaults
# ------------------------------------------------------------------------------------------------
DEFAULT_HABIT_EMOJI = "🎯"
DEFAULT_HABIT_CATEGORY = "Health"
DEFAULT_HABIT_TARGET = 1
DEFAULT_ZERO = 0
HABIT_NAME_MAX_LENGTH = 100

HABIT_CATEGORIES: Final[tuple[str, ...]] = (
    "Health",
    "Fitness",
    "Learning",
    "Wellness",
    "Productivity",
    "Social",
    "Mindfulness",
    "Creativity",
    "Lifestyle",
    "Personal Care",
)

# Seed habits written on first load
DEFAULT_HABITS: Final[tuple[dict, ...]] = (
    {
        DATA_HABIT_ID: "1",
        DATA_HABIT_NAME: "Drink Water",
        DATA_HABIT_EMOJI: "💧",
        DATA_HABIT_CATEGORY: "Health",
        DATA_HABIT_TARGET: 8,
    },
    {
        DATA_HABIT_ID: "2",
        DATA_HABIT_NAME: "Read Books",
        DATA_HABIT_EMOJI: "📚",
        DATA_HABIT_CATEGORY: "Learning",
        DATA_HABIT_TARGET: 1,
    },
    {
        DATA_HABIT_ID: "3",
        DATA_HABIT_NAME: "Exercise",
        DATA_HABIT_EMOJI: "🏃‍♂️",
        DATA_HABIT_CATEGORY: "Fitness",
        DATA_HABIT_TARGET: 1,
    },
    {
        DATA_HABIT_ID: "4",
        DATA_HABIT_NAME: "Meditate",
        DATA_HABIT_EMOJI: "🧘‍♀️",
        DATA_HABIT_CATEGORY: "Wellness",
        DATA_HABIT_TARGET: 1,
    },
)

# ------------------------------------------------------------------------------------------------
# Moods
# ------------------------------------------------------------------------------------------------
MOOD_HAPPY = "happy"
MOOD_NEUTRAL = "neutral"
MOOD_SAD = "sad"
MOOD_VALUES: Final[tuple[str, ...]] = (MOOD_HAPPY, MOOD_NEUTRAL, MOOD_SAD)

MOOD_EMOJIS: Final[dict[str, str]] = {
    MOOD_HAPPY: "😊",
    MOOD_NEUTRAL: "😐",
    MOOD_SAD: "😔",
}

# ------------------------------------------------------------------------------------------------
# Experience & Levels
# ------------------------------------------------------------------------------------------------
XP_PER_COMPLETION: Final = 25
XP_PER_LEVEL: Final = 1000

# Level threshold -> badge, granted once on the level-up that reaches it
LEVEL_BADGES: Final[tuple[tuple[int, str], ...]] = (
    (5, "🌟"),
    (10, "💎"),
    (20, "🏆"),
)

# Per-habit streak threshold -> badge
STREAK_BADGES: Final[tuple[tuple[int, str], ...]] = (
    (7, "🔥"),
    (30, "⚡"),
    (100, "👑"),
)

# ------------------------------------------------------------------------------------------------
# Achievements
# ------------------------------------------------------------------------------------------------
ACHIEVEMENT_CATEGORY_STREAK = "streak"
ACHIEVEMENT_CATEGORY_COMPLETION = "completion"
ACHIEVEMENT_CATEGORY_LEVEL = "level"
ACHIEVEMENT_CATEGORY_CONSISTENCY = "consistency"
ACHIEVEMENT_CATEGORY_VARIETY = "variety"
ACHIEVEMENT_CATEGORIES: Final[tuple[str, ...]] = (
    ACHIEVEMENT_CATEGORY_STREAK,
    ACHIEVEMENT_CATEGORY_LEVEL,
    ACHIEVEMENT_CATEGORY_COMPLETION,
    ACHIEVEMENT_CATEGORY_CONSISTENCY,
    ACHIEVEMENT_CATEGORY_VARIETY,
)

ACHIEVEMENT_RARITY_COMMON = "common"
ACHIEVEMENT_RARITY_RARE = "rare"
ACHIEVEMENT_RARITY_EPIC = "epic"
ACHIEVEMENT_RARITY_LEGENDARY = "legendary"

# Achievement ids with dedicated variety rules
ACHIEVEMENT_ID_DIVERSIFIED = "diversified"
ACHIEVEMENT_ID_HABIT_COLLECTOR = "habit-collector"

# Consistency scan horizon (days walked back from today)
CONSISTENCY_MAX_DAYS: Final = 365

# ------------------------------------------------------------------------------------------------
# Analytics
# ------------------------------------------------------------------------------------------------
ANALYTICS_WINDOW_WEEK = 7
ANALYTICS_WINDOW_MONTH = 30
ANALYTICS_WINDOW_MAX = 365
DEFAULT_ANALYTICS_WINDOW = ANALYTICS_WINDOW_WEEK

# ------------------------------------------------------------------------------------------------
# Events & Signals
# ------------------------------------------------------------------------------------------------
# Home Assistant bus events
EVENT_HABIT_COMPLETED = "habit_hero_habit_completed"
EVENT_LEVEL_UP = "habit_hero_level_up"
EVENT_ACHIEVEMENT_UNLOCKED = "habit_hero_achievement_unlocked"

# Dispatcher signal suffixes (instance scoped)
SIGNAL_SUFFIX_HABITS_CHANGED = "habits_changed"

# Event / signal payload keys
ATTR_HABIT_ID = "habit_id"
ATTR_HABIT_NAME = "habit_name"
ATTR_STREAK = "streak"
ATTR_OLD_LEVEL = "old_level"
ATTR_NEW_LEVEL = "new_level"
ATTR_BADGES = "badges"
ATTR_NEW_BADGES = "new_badges"
ATTR_ACHIEVEMENT_ID = "achievement_id"
ATTR_TITLE = "title"
ATTR_BADGE = "badge"
ATTR_RARITY = "rarity"
ATTR_NOW = "now"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_TOGGLE_HABIT = "toggle_habit"
SERVICE_ADD_HABIT = "add_habit"
SERVICE_UPDATE_HABIT = "update_habit"
SERVICE_REMOVE_HABIT = "remove_habit"
SERVICE_LOG_MOOD = "log_mood"
SERVICE_GET_ANALYTICS = "get_analytics"
SERVICE_GET_ACHIEVEMENTS = "get_achievements"
SERVICE_EXPORT_DATA = "export_data"
SERVICE_IMPORT_DATA = "import_data"
SERVICE_RESET_ALL_DATA = "reset_all_data"

# Service fields
FIELD_HABIT_ID = "habit_id"
FIELD_NAME = "name"
FIELD_EMOJI = "emoji"
FIELD_CATEGORY = "category"
FIELD_TARGET = "target"
FIELD_MOOD = "mood"
FIELD_NOTE = "note"
FIELD_WINDOW_DAYS = "window_days"
FIELD_DATA = "data"

# ------------------------------------------------------------------------------------------------
# Error Messages
# ------------------------------------------------------------------------------------------------
MSG_NO_ENTRY_FOUND = "No Habit Hero entry found"
ERROR_HABIT_NOT_FOUND_FMT = "Habit '{}' not found"
ERROR_INVALID_IMPORT_FMT = "Import rejected, current data kept: {}"
ERROR_INVALID_HABIT_FMT = "Invalid habit data: {}"

# Translation keys
TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"

# ------------------------------------------------------------------------------------------------
# Sensors
# ------------------------------------------------------------------------------------------------
SENSOR_KEY_LEVEL = "level"
SENSOR_KEY_TODAY_PROGRESS = "today_progress"
SENSOR_KEY_COMPLETION_RATE = "completion_rate"
SENSOR_KEY_ACHIEVEMENTS = "achievements"
SENSOR_KEY_LONGEST_STREAK = "longest_streak"
SENSOR_KEY_TODAY_MOOD = "today_mood"

ATTR_XP = "xp"
ATTR_XP_TO_NEXT = "xp_to_next"
ATTR_TOTAL_XP = "total_xp"
ATTR_JOIN_DATE = "join_date"
ATTR_COMPLETED = "completed"
ATTR_TOTAL = "total"
ATTR_HABITS = "habits"
ATTR_WINDOW_DAYS = "window_days"
ATTR_UNLOCKED = "unlocked"
ATTR_CATEGORIES = "categories"
ATTR_STREAK_STATS = "streak_stats"
ATTR_NOTE = "note"
ATTR_STORAGE_AVAILABLE = "storage_available"
