"""Gamification Engine - Pure logic for achievement evaluation.

This engine provides stateless, pure Python functions for:
- The static achievement catalog (16 definitions in 5 categories)
- Progress metrics per achievement (rule registry keyed by achievement id)
- The "perfect day" consistency streak scan
- Diffing current unlocks against the persisted unlock snapshot

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data.
The GamificationManager owns side effects (badges, events, storage).

Unlocks are sticky: once an achievement id is in the persisted snapshot it
counts as unlocked even if its live progress later drops (habit deleted,
streak broken).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import iter_days_back, to_calendar_day
from ..utils.math_utils import percentage

if TYPE_CHECKING:
    from datetime import date, datetime

    from ..type_defs import (
        AchievementState,
        AchievementSummary,
        HabitData,
        UserStatsData,
    )


@dataclass(frozen=True)
class AchievementDefinition:
    """Static description of one achievement."""

    id: str
    title: str
    description: str
    icon: str
    requirement: int
    category: str
    rarity: str

    @property
    def badge(self) -> str:
        """Glyph appended to the user's badges on unlock."""
        return self.icon

    def to_state(self, progress: int, unlocked: bool) -> AchievementState:
        """Join the definition with derived progress."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "badge": self.badge,
            "requirement": self.requirement,
            "category": self.category,  # type: ignore[typeddict-item]
            "rarity": self.rarity,  # type: ignore[typeddict-item]
            "progress": progress,
            "unlocked": unlocked,
        }


def _definition(
    achievement_id: str,
    title: str,
    description: str,
    icon: str,
    requirement: int,
    category: str,
    rarity: str,
) -> AchievementDefinition:
    return AchievementDefinition(
        id=achievement_id,
        title=title,
        description=description,
        icon=icon,
        requirement=requirement,
        category=category,
        rarity=rarity,
    )


_STREAK = const.ACHIEVEMENT_CATEGORY_STREAK
_LEVEL = const.ACHIEVEMENT_CATEGORY_LEVEL
_COMPLETION = const.ACHIEVEMENT_CATEGORY_COMPLETION
_CONSISTENCY = const.ACHIEVEMENT_CATEGORY_CONSISTENCY
_VARIETY = const.ACHIEVEMENT_CATEGORY_VARIETY
_COMMON = const.ACHIEVEMENT_RARITY_COMMON
_RARE = const.ACHIEVEMENT_RARITY_RARE
_EPIC = const.ACHIEVEMENT_RARITY_EPIC
_LEGENDARY = const.ACHIEVEMENT_RARITY_LEGENDARY

ACHIEVEMENT_CATALOG: tuple[AchievementDefinition, ...] = (
    # Streak achievements
    _definition("first-streak", "Getting Started", "Complete your first habit", "🌱", 1, _STREAK, _COMMON),
    _definition("week-warrior", "Week Warrior", "Maintain a 7-day streak", "🔥", 7, _STREAK, _COMMON),
    _definition("fortnight-hero", "Fortnight Hero", "Maintain a 14-day streak", "⚡", 14, _STREAK, _RARE),
    _definition("month-master", "Month Master", "Maintain a 30-day streak", "💎", 30, _STREAK, _EPIC),
    _definition("century-champion", "Century Champion", "Maintain a 100-day streak", "👑", 100, _STREAK, _LEGENDARY),
    # Level achievements
    _definition("level-up", "Level Up", "Reach level 5", "⭐", 5, _LEVEL, _COMMON),
    _definition("experienced", "Experienced", "Reach level 10", "🌟", 10, _LEVEL, _RARE),
    _definition("expert", "Expert", "Reach level 20", "💫", 20, _LEVEL, _EPIC),
    _definition("master", "Master", "Reach level 50", "🏆", 50, _LEVEL, _LEGENDARY),
    # Completion achievements
    _definition("first-hundred", "First Hundred", "Complete 100 habits total", "💯", 100, _COMPLETION, _COMMON),
    _definition("five-hundred", "Five Hundred Club", "Complete 500 habits total", "🎯", 500, _COMPLETION, _RARE),
    _definition("thousand", "Thousand Strong", "Complete 1000 habits total", "🚀", 1000, _COMPLETION, _EPIC),
    # Consistency achievements
    _definition("perfect-week", "Perfect Week", "Complete all habits for 7 days straight", "🎪", 7, _CONSISTENCY, _RARE),
    _definition("perfect-month", "Perfect Month", "Complete all habits for 30 days straight", "🎭", 30, _CONSISTENCY, _LEGENDARY),
    # Variety achievements
    _definition(const.ACHIEVEMENT_ID_DIVERSIFIED, "Diversified", "Create habits in 5 different categories", "🌈", 5, _VARIETY, _RARE),
    _definition(const.ACHIEVEMENT_ID_HABIT_COLLECTOR, "Habit Collector", "Create 20 different habits", "📚", 20, _VARIETY, _EPIC),
)  # fmt: skip


# Metric signature: (habits, stats, now) -> progress
ProgressMetric = Callable[
    ["list[HabitData]", "UserStatsData", "datetime"], int
]


class GamificationEngine:
    """Pure logic engine for achievement evaluation.

    All methods are static - no instance state.

    Evaluation Flow:
        1. evaluate() computes progress for every catalog entry
        2. find_new_unlocks() diffs against the persisted unlock snapshot
        3. The manager appends badges, fires events and persists the snapshot
    """

    # =========================================================================
    # PROGRESS METRICS
    # =========================================================================

    @staticmethod
    def max_streak(habits: list[HabitData]) -> int:
        """Return the longest current streak across all habits (0 if none)."""
        return max(
            (h.get(const.DATA_HABIT_STREAK, const.DEFAULT_ZERO) for h in habits),
            default=0,
        )

    @staticmethod
    def total_completions(habits: list[HabitData]) -> int:
        """Return the lifetime completion count across all habits."""
        return sum(
            h.get(const.DATA_HABIT_TOTAL_COMPLETED, const.DEFAULT_ZERO)
            for h in habits
        )

    @staticmethod
    def distinct_categories(habits: list[HabitData]) -> int:
        """Return the number of distinct habit categories in use."""
        return len({h.get(const.DATA_HABIT_CATEGORY) for h in habits})

    @staticmethod
    def completion_days(habit: HabitData) -> set[date]:
        """Return the calendar days covered by a habit's current streak run.

        The run is ``max(streak, 1)`` consecutive days ending on the day of
        ``lastCompleted``. A habit never completed has no completion days.
        """
        last_day = to_calendar_day(habit.get(const.DATA_HABIT_LAST_COMPLETED))
        if last_day is None:
            return set()
        run = max(habit.get(const.DATA_HABIT_STREAK, const.DEFAULT_ZERO), 1)
        return {last_day - timedelta(days=offset) for offset in range(run)}

    @staticmethod
    def consistency_streak(
        habits: list[HabitData],
        now: datetime,
        max_days: int = const.CONSISTENCY_MAX_DAYS,
    ) -> int:
        """Count consecutive perfect days ending today.

        A day is perfect when every habit in the ledger has a completion dated
        that day. The scan walks back from today and stops at the first day
        that is not perfect, or after ``max_days``. An empty ledger yields 0.
        """
        if not habits:
            return 0

        per_habit_days = [GamificationEngine.completion_days(h) for h in habits]
        perfect_days = 0
        for day in iter_days_back(now, max_days):
            if not all(day in days for days in per_habit_days):
                break
            perfect_days += 1
        return perfect_days

    # =========================================================================
    # RULE REGISTRY
    # =========================================================================

    # Maps category -> metric; variety is keyed per achievement id instead
    _CATEGORY_METRICS: dict[str, ProgressMetric] = {}
    _ID_METRICS: dict[str, ProgressMetric] = {}

    @classmethod
    def _register_metrics(cls) -> None:
        """Populate the metric registries once."""
        if cls._CATEGORY_METRICS:
            return

        cls._CATEGORY_METRICS = {
            _STREAK: lambda habits, _stats, _now: cls.max_streak(habits),
            _LEVEL: lambda _habits, stats, _now: stats.get(const.DATA_STATS_LEVEL, 1),
            _COMPLETION: lambda habits, _stats, _now: cls.total_completions(habits),
            _CONSISTENCY: lambda habits, _stats, now: cls.consistency_streak(
                habits, now
            ),
        }
        cls._ID_METRICS = {
            const.ACHIEVEMENT_ID_DIVERSIFIED: (
                lambda habits, _stats, _now: cls.distinct_categories(habits)
            ),
            const.ACHIEVEMENT_ID_HABIT_COLLECTOR: (
                lambda habits, _stats, _now: len(habits)
            ),
        }

    @classmethod
    def metric_for(cls, definition: AchievementDefinition) -> ProgressMetric | None:
        """Return the progress metric for a definition, or None if unknown."""
        cls._register_metrics()
        return cls._ID_METRICS.get(definition.id) or cls._CATEGORY_METRICS.get(
            definition.category
        )

    # =========================================================================
    # EVALUATION
    # =========================================================================

    @classmethod
    def evaluate(
        cls,
        habits: list[HabitData],
        stats: UserStatsData,
        now: datetime,
        catalog: Iterable[AchievementDefinition] = ACHIEVEMENT_CATALOG,
        previously_unlocked: Iterable[str] = (),
    ) -> list[AchievementState]:
        """Compute progress and unlock state for every definition.

        Args:
            habits: Current habit ledger
            stats: Current user stats
            now: Evaluation instant (one snapshot for the whole pass)
            catalog: Definitions to evaluate
            previously_unlocked: Ids already unlocked; they stay unlocked

        Returns:
            One AchievementState per definition, in catalog order.
        """
        sticky = set(previously_unlocked)
        states: list[AchievementState] = []
        for definition in catalog:
            metric = cls.metric_for(definition)
            progress = metric(habits, stats, now) if metric else 0
            unlocked = progress >= definition.requirement or definition.id in sticky
            states.append(definition.to_state(progress, unlocked))
        return states

    @staticmethod
    def find_new_unlocks(
        states: Iterable[AchievementState], previously_unlocked: Iterable[str]
    ) -> list[AchievementState]:
        """Return states unlocked now that are not in the prior snapshot."""
        known = set(previously_unlocked)
        return [s for s in states if s["unlocked"] and s["id"] not in known]

    @staticmethod
    def summarize(
        states: Iterable[AchievementState], previously_unlocked: Iterable[str] = ()
    ) -> AchievementSummary:
        """Return unlocked/total counters overall and per category."""
        sticky = set(previously_unlocked)
        categories: dict[str, dict[str, int]] = {
            category: {"unlocked": 0, "total": 0}
            for category in const.ACHIEVEMENT_CATEGORIES
        }
        unlocked_total = 0
        total = 0
        for state in states:
            bucket = categories.setdefault(
                state["category"], {"unlocked": 0, "total": 0}
            )
            bucket["total"] += 1
            total += 1
            if state["unlocked"] or state["id"] in sticky:
                bucket["unlocked"] += 1
                unlocked_total += 1

        return {
            "unlocked": unlocked_total,
            "total": total,
            "percentage": percentage(unlocked_total, total),
            "categories": categories,  # type: ignore[typeddict-item]
        }
