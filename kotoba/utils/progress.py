"""
Level and ratio helpers for points-based progress.

Provides:
- Level derivation from accumulated points
- Progress within the current level
- Completion ratios for card-based lessons
"""

from __future__ import annotations

POINTS_PER_LEVEL = 100


def level_for_points(points: int) -> int:
    """
    Derive the learner level from total points.

    Example:
        >>> level_for_points(250)
        3
    """
    if points < 0:
        raise ValueError(f"points cannot be negative: {points}")
    return points // POINTS_PER_LEVEL + 1


def points_to_next_level(points: int) -> int:
    """Points still needed to reach the next level (1-100)."""
    return POINTS_PER_LEVEL - (points % POINTS_PER_LEVEL)


def level_progress(points: int) -> float:
    """
    Fraction of the current level already earned, in [0, 1).

    Example:
        >>> level_progress(250)
        0.5
    """
    return (points % POINTS_PER_LEVEL) / POINTS_PER_LEVEL


def completion_ratio(completed: int, total: int) -> float:
    """
    Share of completed items, clamped to [0, 1].

    An empty lesson has nothing to complete and reports 0.0.
    """
    if total <= 0 or completed <= 0:
        return 0.0
    return min(1.0, completed / total)
