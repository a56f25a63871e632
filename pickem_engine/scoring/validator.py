"""Audit of persisted pick scoring.

Two levels of checking are provided. ``validate_game_scoring`` applies the
coarse rules an operator can verify by eye (ties score zero, winning picks
score positive, losing locks score -2). ``find_scoring_discrepancies``
compares every persisted field with a fresh recomputation and is what the
reconciliation sweep uses to decide which games need a rerun.

Example:
    >>> validation = validate_game_scoring(game, picks)
    >>> if not validation.is_valid:
    ...     print(validation.issues)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from pickem_engine.scoring.engine import compute_game_fields
from pickem_engine.scoring.outcome import is_tie, resolve_winner
from pickem_engine.scoring.points import INCORRECT_LOCK_POINTS
from pickem_engine.types import (
    GameRecord,
    GameStatus,
    PickFields,
    PickId,
    PickRecord,
)


@dataclass
class ScoringValidation:
    """Result of a coarse scoring check for one game.

    Attributes:
        is_valid: True if no issues were found.
        issues: Human-readable issue descriptions.
    """

    is_valid: bool = True
    issues: list[str] = field(default_factory=list)

    def add_issue(self, issue: str) -> None:
        self.issues.append(issue)
        self.is_valid = False


@dataclass(frozen=True)
class ScoringDiscrepancy:
    """A pick whose persisted fields differ from a fresh recomputation."""

    pick_id: PickId
    expected: PickFields
    actual: PickFields

    @property
    def changed_fields(self) -> list[str]:
        expected = self.expected.as_dict()
        actual = self.actual.as_dict()
        return [name for name in expected if expected[name] != actual[name]]


def validate_game_scoring(
    game: GameRecord, picks: Sequence[PickRecord]
) -> ScoringValidation:
    """Check persisted points of a game against the basic scoring rules.

    Games that are not completed are always valid; their points are pending.

    Args:
        game: Game to check.
        picks: All picks on the game with their persisted fields.

    Returns:
        ScoringValidation listing any issues.
    """
    validation = ScoringValidation()

    if game.status != GameStatus.COMPLETED or not game.has_final_score:
        return validation

    if is_tie(game):
        nonzero = [p for p in picks if p.pick_points != 0]
        if nonzero:
            validation.add_issue(
                f"{len(nonzero)} picks have non-zero points in a tie game"
            )
        return validation

    winner = resolve_winner(game)

    winning_without_points = [
        p for p in picks if p.picked_team == winner and p.pick_points <= 0
    ]
    if winning_without_points:
        validation.add_issue(
            f"{len(winning_without_points)} winning picks have 0 or negative points"
        )

    wrong_losing_locks = [
        p
        for p in picks
        if p.picked_team != winner
        and p.is_lock
        and p.pick_points != INCORRECT_LOCK_POINTS
    ]
    if wrong_losing_locks:
        validation.add_issue(
            f"{len(wrong_losing_locks)} losing locks don't have "
            f"{INCORRECT_LOCK_POINTS} points"
        )

    return validation


def find_scoring_discrepancies(
    game: GameRecord, picks: Sequence[PickRecord]
) -> list[ScoringDiscrepancy]:
    """List picks whose persisted fields disagree with a recomputation.

    Args:
        game: Game the picks belong to.
        picks: All picks on the game with their persisted fields.

    Returns:
        One ScoringDiscrepancy per mismatching pick, in input order.
    """
    expected = compute_game_fields(game, picks)
    return [
        ScoringDiscrepancy(pick_id=p.id, expected=expected[p.id], actual=p.fields)
        for p in picks
        if expected[p.id] != p.fields
    ]
