"""Game outcome resolution.

A game only produces a winner once it is completed with both scores present
and the scores differ. A tie voids the game for scoring purposes.

Example:
    >>> winner = resolve_winner(game)
    >>> if winner is None:
    ...     print("no winner: tie or not final")
"""

from __future__ import annotations

from dataclasses import dataclass

from pickem_engine.types import GameRecord, GameStatus, TeamId


@dataclass(frozen=True)
class ScoringReadiness:
    """Whether a game's picks can be assigned final points.

    Attributes:
        can_score: True if the game is final with both scores and a valid week.
        reason: Why the game cannot be scored, if it cannot.
    """

    can_score: bool
    reason: str | None = None


def resolve_winner(game: GameRecord) -> TeamId | None:
    """Determine the winning team of a game.

    Args:
        game: Game to resolve.

    Returns:
        The team with the strictly higher score, or None when the game is not
        completed, a score is missing, or the game is tied.
    """
    if game.status != GameStatus.COMPLETED:
        return None
    if game.home_score is None or game.away_score is None:
        return None
    if game.home_score == game.away_score:
        return None
    return game.home_team if game.home_score > game.away_score else game.away_team


def is_tie(game: GameRecord) -> bool:
    """True for a completed game with equal, non-null scores."""
    return game.has_final_score and game.home_score == game.away_score


def validate_game_for_scoring(game: GameRecord) -> ScoringReadiness:
    """Check whether final points can be computed for a game."""
    if game.status != GameStatus.COMPLETED:
        return ScoringReadiness(False, "Game not completed")
    if game.home_score is None:
        return ScoringReadiness(False, "Missing home score")
    if game.away_score is None:
        return ScoringReadiness(False, "Missing away score")
    if game.week < 1:
        return ScoringReadiness(False, "Invalid week")
    return ScoringReadiness(True)
