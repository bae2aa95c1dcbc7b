"""Managers for Habit Hero.

Managers own side effects (persistence, bus events, dispatcher signals) and
delegate all computation to the pure engines.
"""

from .base_manager import BaseManager
from .gamification_manager import GamificationManager
from .habit_manager import HabitManager

__all__ = ["BaseManager", "GamificationManager", "HabitManager"]
