"""Engine modules for Habit Hero.

Contains the pure computation engines:
- habit_engine: Completion toggling, streak decay, ledger CRUD, moods
- experience_engine: XP, levels and badge glyphs
- gamification_engine: Achievement catalog and evaluation
- statistics_engine: Day-bucketed series and analytics rollups
"""

# Use relative imports within package to avoid mypy module resolution issues
from .experience_engine import ExperienceEngine, XpAwardResult
from .gamification_engine import (
    ACHIEVEMENT_CATALOG,
    AchievementDefinition,
    GamificationEngine,
)
from .habit_engine import HabitEngine, HabitNotFoundError, ToggleResult
from .statistics_engine import StatisticsEngine

__all__ = [
    "ACHIEVEMENT_CATALOG",
    "AchievementDefinition",
    "ExperienceEngine",
    "GamificationEngine",
    "HabitEngine",
    "HabitNotFoundError",
    "StatisticsEngine",
    "ToggleResult",
    "XpAwardResult",
]
