"""Experience Engine - Pure logic for XP, levels and badge glyphs.

Level fields are always derived from lifetime XP:

    level    = totalXP // XP_PER_LEVEL + 1
    xp       = totalXP %  XP_PER_LEVEL
    xpToNext = XP_PER_LEVEL - xp

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .. import const

if TYPE_CHECKING:
    from ..type_defs import UserStatsData


@dataclass
class XpAwardResult:
    """Outcome of ExperienceEngine.award_xp().

    Attributes:
        stats: The mutated user stats
        leveled_up: True when the award crossed at least one level boundary
        old_level: Level before the award
        new_level: Level after the award
        new_badges: Level badges appended by this award
    """

    stats: UserStatsData
    leveled_up: bool
    old_level: int
    new_level: int
    new_badges: list[str] = field(default_factory=list)


class ExperienceEngine:
    """Pure logic engine for experience and leveling.

    All methods are static - no instance state.
    """

    XP_PER_COMPLETION = const.XP_PER_COMPLETION
    XP_PER_LEVEL = const.XP_PER_LEVEL

    @staticmethod
    def level_for_total(total_xp: int) -> int:
        """Return the level reached with ``total_xp`` lifetime XP."""
        return max(total_xp, 0) // const.XP_PER_LEVEL + 1

    @staticmethod
    def build_level_fields(total_xp: int) -> dict[str, int]:
        """Return level, xp and xpToNext derived from lifetime XP."""
        total_xp = max(total_xp, 0)
        xp = total_xp % const.XP_PER_LEVEL
        return {
            const.DATA_STATS_LEVEL: ExperienceEngine.level_for_total(total_xp),
            const.DATA_STATS_XP: xp,
            const.DATA_STATS_XP_TO_NEXT: const.XP_PER_LEVEL - xp,
        }

    @staticmethod
    def add_badges(stats: UserStatsData, badges: Iterable[str]) -> list[str]:
        """Append badges not yet owned, keeping order.

        Returns:
            The badges actually appended.
        """
        owned = stats.setdefault(const.DATA_STATS_BADGES, [])
        seen = set(owned)
        added: list[str] = []
        for badge in badges:
            if badge in seen:
                continue
            owned.append(badge)
            seen.add(badge)
            added.append(badge)
        return added

    @staticmethod
    def award_xp(stats: UserStatsData, amount: int) -> XpAwardResult:
        """Add XP and recompute the level fields.

        On a level-up every level badge whose threshold is at or below the new
        level is granted if not already owned.

        Raises:
            ValueError: ``amount`` is negative. Stats are left untouched.
        """
        if amount < 0:
            raise ValueError(f"XP award must be non-negative, got {amount}")

        old_level = stats.get(const.DATA_STATS_LEVEL, 1)
        total_xp = stats.get(const.DATA_STATS_TOTAL_XP, const.DEFAULT_ZERO) + amount
        stats[const.DATA_STATS_TOTAL_XP] = total_xp
        stats.update(ExperienceEngine.build_level_fields(total_xp))  # type: ignore[typeddict-item]
        new_level = stats[const.DATA_STATS_LEVEL]

        leveled_up = new_level > old_level
        new_badges: list[str] = []
        if leveled_up:
            new_badges = ExperienceEngine.add_badges(
                stats,
                [
                    badge
                    for threshold, badge in const.LEVEL_BADGES
                    if threshold <= new_level
                ],
            )

        return XpAwardResult(
            stats=stats,
            leveled_up=leveled_up,
            old_level=old_level,
            new_level=new_level,
            new_badges=new_badges,
        )

    @staticmethod
    def streak_milestone_badges(streak: int, badges: Iterable[str]) -> list[str]:
        """Return the streak badges earned at ``streak`` that are not owned yet."""
        owned = set(badges)
        return [
            badge
            for threshold, badge in const.STREAK_BADGES
            if streak >= threshold and badge not in owned
        ]
