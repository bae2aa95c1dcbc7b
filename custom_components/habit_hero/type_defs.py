"""Type definitions for Habit Hero data structures.

TypedDicts describe the persisted document and the service response shapes.
Field names of the persisted document are camelCase because the document is
the same JSON interchange format the Habit Hero web app exports and imports.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime shape checks live in
data_builders.py (parse_document / normalize_document).

IMPORTANT: This file must NOT import from coordinator.py or managers to avoid
circular dependencies. Only typing machinery is imported here.
"""

from typing import Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

HabitId = str  # Creation-time token, e.g. "1737200000000-3f2a..."
AchievementId = str  # Kebab-case catalog id, e.g. "week-warrior"
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"

MoodValue = Literal["happy", "neutral", "sad"]
AchievementCategory = Literal[
    "streak", "completion", "level", "consistency", "variety"
]
AchievementRarity = Literal["common", "rare", "epic", "legendary"]


# =============================================================================
# Persisted Document
# =============================================================================


class HabitData(TypedDict):
    """A tracked habit with its completion counters."""

    id: HabitId
    name: str
    emoji: str
    category: str
    target: int
    streak: int
    totalCompleted: int
    lastCompleted: ISODatetime | None
    # Completion replaced by a same-day completion, restored on uncomplete
    previousCompleted: NotRequired[ISODatetime | None]


class MoodData(TypedDict):
    """One mood entry, at most one per calendar day."""

    date: ISODatetime
    mood: MoodValue
    note: NotRequired[str]


class UserStatsData(TypedDict):
    """Experience, level and badge state.

    ``level``, ``xp`` and ``xpToNext`` are always derived from ``totalXP``.
    """

    level: int
    xp: int
    xpToNext: int
    totalXP: int
    badges: list[str]
    joinDate: ISODatetime


class AppDocument(TypedDict):
    """The single persisted document."""

    habits: list[HabitData]
    moods: list[MoodData]
    userStats: UserStatsData
    lastUpdated: ISODatetime
    unlockedAchievements: NotRequired[list[AchievementId]]


# =============================================================================
# Achievements
# =============================================================================


class AchievementState(TypedDict):
    """An achievement definition joined with its derived progress."""

    id: AchievementId
    title: str
    description: str
    icon: str
    badge: str
    requirement: int
    category: AchievementCategory
    rarity: AchievementRarity
    progress: int
    unlocked: bool


class AchievementCategorySummary(TypedDict):
    """Unlocked/total counts for one achievement category."""

    unlocked: int
    total: int


class AchievementSummary(TypedDict):
    """Header counters of the achievements view."""

    unlocked: int
    total: int
    percentage: int
    categories: dict[str, AchievementCategorySummary]


# =============================================================================
# Analytics
# =============================================================================


class DailyPoint(TypedDict):
    """One day of the completion/mood series."""

    date: ISODate
    completed: int
    total: int
    mood: MoodValue | None


class StreakStats(TypedDict):
    """Aggregate streak figures across all habits."""

    total: int
    average: int
    longest: int
    active: int


class CategoryStats(TypedDict):
    """Today's completion figures for one habit category."""

    category: str
    total: int
    completed: int
    percentage: int


class TodayProgress(TypedDict):
    """Today's completed/total habits."""

    completed: int
    total: int
    percentage: int


class WeeklyReport(TypedDict):
    """Current calendar week (Sunday start) summary."""

    week_start: ISODate
    completion_rate: int
    total_completed: int
    best_day: str | None
    best_day_count: int
    average_daily: int


class AnalyticsReport(TypedDict):
    """Response of the get_analytics service."""

    window_days: int
    daily: list[DailyPoint]
    completion_rate: int
    streak_stats: StreakStats
    categories: list[CategoryStats]
    mood_distribution: dict[str, int]
    today: TodayProgress
    weekly: WeeklyReport
