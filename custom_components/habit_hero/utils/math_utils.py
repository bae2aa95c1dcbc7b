# File: utils/math_utils.py
"""Math utilities for Habit Hero.

Pure Python math functions with ZERO Home Assistant dependencies.

Functions:
    - round_half_up: Integer rounding where .5 always rounds up
    - percentage: Integer percentage with a zero-denominator guard
"""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounded toward +infinity.

    Python's built-in ``round`` uses banker's rounding (``round(2.5) == 2``);
    displayed percentages and averages here expect ``2.5 -> 3``.

    Example:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(62.49)
        62
    """
    return math.floor(value + 0.5)


def percentage(part: float, whole: float) -> int:
    """Return ``part / whole`` as a rounded integer percentage.

    Returns 0 when ``whole`` is zero or negative instead of raising.
    """
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)
