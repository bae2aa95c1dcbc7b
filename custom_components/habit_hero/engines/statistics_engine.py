"""Statistics Engine - Pure logic for habit analytics.

This engine provides stateless, pure Python functions for:
- Day-bucketed completion/mood series over a rolling window
- Completion rate, streak and per-category rollups
- Today's progress and the current calendar week's report

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods; nothing is cached. Every rollup is a pure
function of (habits, moods, now, window_days).
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import iter_days_back, to_calendar_day
from ..utils.math_utils import percentage, round_half_up
from .habit_engine import HabitEngine

if TYPE_CHECKING:
    from datetime import datetime

    from ..type_defs import (
        AnalyticsReport,
        CategoryStats,
        DailyPoint,
        HabitData,
        MoodData,
        StreakStats,
        TodayProgress,
        WeeklyReport,
    )


class StatisticsEngine:
    """Pure logic engine for analytics rollups.

    All methods are static - no instance state.
    """

    @staticmethod
    def build_daily_series(
        habits: list[HabitData],
        moods: list[MoodData],
        now: datetime,
        window_days: int,
    ) -> list[DailyPoint]:
        """Return exactly ``window_days`` day entries, oldest first, ending today.

        ``completed`` counts habits whose last completion falls on that day;
        ``mood`` is the mood logged that day, if any.
        """
        series: list[DailyPoint] = []
        for day in reversed(list(iter_days_back(now, window_days))):
            mood_entry = HabitEngine.mood_for_day(moods, day)
            series.append(
                {
                    "date": day.isoformat(),
                    "completed": HabitEngine.count_completed_on(habits, day),
                    "total": len(habits),
                    "mood": mood_entry.get(const.DATA_MOOD_MOOD) if mood_entry else None,
                }
            )
        return series

    @staticmethod
    def completion_rate(series: list[DailyPoint], habit_count: int) -> int:
        """Return completions over possible completions as a percentage.

        0 when there are no habits or no days.
        """
        completed = sum(point["completed"] for point in series)
        return percentage(completed, len(series) * habit_count)

    @staticmethod
    def streak_stats(habits: list[HabitData]) -> StreakStats:
        """Return total, rounded mean, longest and active streak counts."""
        streaks = [h.get(const.DATA_HABIT_STREAK, const.DEFAULT_ZERO) for h in habits]
        total = sum(streaks)
        return {
            "total": total,
            "average": round_half_up(total / len(streaks)) if streaks else 0,
            "longest": max(streaks, default=0),
            "active": sum(1 for streak in streaks if streak > 0),
        }

    @staticmethod
    def category_breakdown(
        habits: list[HabitData], now: datetime
    ) -> list[CategoryStats]:
        """Return per-category habit count and today's completions.

        Categories appear in order of first use in the ledger.
        """
        buckets: dict[str, dict[str, int]] = {}
        for habit in habits:
            bucket = buckets.setdefault(
                habit.get(const.DATA_HABIT_CATEGORY, const.DEFAULT_HABIT_CATEGORY),
                {"total": 0, "completed": 0},
            )
            bucket["total"] += 1
            if HabitEngine.is_completed_on(habit, now):
                bucket["completed"] += 1

        return [
            {
                "category": category,
                "total": data["total"],
                "completed": data["completed"],
                "percentage": percentage(data["completed"], data["total"]),
            }
            for category, data in buckets.items()
        ]

    @staticmethod
    def today_progress(habits: list[HabitData], now: datetime) -> TodayProgress:
        """Return today's completed/total habit counts."""
        completed = HabitEngine.count_completed_on(habits, now)
        return {
            "completed": completed,
            "total": len(habits),
            "percentage": percentage(completed, len(habits)),
        }

    @staticmethod
    def mood_distribution(series: list[DailyPoint]) -> dict[str, int]:
        """Count logged moods over the series window."""
        counts = dict.fromkeys(const.MOOD_VALUES, 0)
        for point in series:
            mood = point["mood"]
            if mood in counts:
                counts[mood] += 1
        return counts

    @staticmethod
    def weekly_report(habits: list[HabitData], now: datetime) -> WeeklyReport:
        """Summarize the calendar week (Sunday through Saturday) containing now.

        ``best_day`` is the weekday name with the most completions; on a tie
        the later day wins. It is None when nothing was completed this week.
        """
        today = to_calendar_day(now)
        # date.weekday(): Monday == 0, so Sunday is 6
        week_start = today - timedelta(days=(today.weekday() + 1) % 7)

        total_completed = 0
        best_day: str | None = None
        best_day_count = 0
        for offset in range(7):
            day = week_start + timedelta(days=offset)
            completed = HabitEngine.count_completed_on(habits, day)
            total_completed += completed
            if completed > 0 and completed >= best_day_count:
                best_day = day.strftime("%A")
                best_day_count = completed

        return {
            "week_start": week_start.isoformat(),
            "completion_rate": percentage(total_completed, 7 * len(habits)),
            "total_completed": total_completed,
            "best_day": best_day,
            "best_day_count": best_day_count,
            "average_daily": round_half_up(total_completed / 7),
        }

    @staticmethod
    def build_analytics(
        habits: list[HabitData],
        moods: list[MoodData],
        now: datetime,
        window_days: int = const.DEFAULT_ANALYTICS_WINDOW,
    ) -> AnalyticsReport:
        """Bundle every rollup into a single report.

        Raises:
            ValueError: ``window_days`` is outside 1..ANALYTICS_WINDOW_MAX.
        """
        if not 1 <= window_days <= const.ANALYTICS_WINDOW_MAX:
            raise ValueError(
                f"window_days must be between 1 and {const.ANALYTICS_WINDOW_MAX}"
            )

        series = StatisticsEngine.build_daily_series(habits, moods, now, window_days)
        return {
            "window_days": window_days,
            "daily": series,
            "completion_rate": StatisticsEngine.completion_rate(series, len(habits)),
            "streak_stats": StatisticsEngine.streak_stats(habits),
            "categories": StatisticsEngine.category_breakdown(habits, now),
            "mood_distribution": StatisticsEngine.mood_distribution(series),
            "today": StatisticsEngine.today_progress(habits, now),
            "weekly": StatisticsEngine.weekly_report(habits, now),
        }
