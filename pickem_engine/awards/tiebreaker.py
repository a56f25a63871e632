"""Ranking order shared by weekly awards and season standings.

Users are ordered by:
1. Points (descending)
2. Win percentage (descending)
3. Wins (descending)
4. Losses (ascending)

The user id is appended as a final key so equal records sort the same way
on every run.
"""
from __future__ import annotations


def win_percentage(correct: int, total: int) -> float:
    """Fraction of picks that were correct, 0.0 when there are no picks."""
    return correct / total if total > 0 else 0.0


def tiebreaker_key(
    user_id: str, points: int, correct: int, total: int
) -> tuple[int, float, int, int, str]:
    """Sort key placing the best-ranked user first."""
    return (
        -points,
        -win_percentage(correct, total),
        -correct,
        total - correct,
        user_id,
    )
