"""Pure composition of outcome, solo status and point rules for one game.

``compute_game_fields`` derives the five engine-owned pick fields for every
pick on a game without touching the store. The recomputation job persists
its output; the validator and the awards preview compare against it.
"""

from __future__ import annotations

from collections.abc import Iterable

from pickem_engine.logging import get_logger
from pickem_engine.scoring.outcome import resolve_winner, validate_game_for_scoring
from pickem_engine.scoring.points import score_pick
from pickem_engine.scoring.solo import compute_game_solo_statuses
from pickem_engine.types import GameRecord, PickFields, PickId, PickRecord

logger = get_logger(__name__)


def compute_game_fields(
    game: GameRecord, picks: Iterable[PickRecord]
) -> dict[PickId, PickFields]:
    """Compute the engine-owned fields for every pick on a game.

    Solo flags are always derived. Points are only awarded when the game has
    a winner; ties and games that are not final give every pick zero points,
    locks included.

    Args:
        game: The game the picks belong to.
        picks: All picks on the game.

    Returns:
        Mapping of pick id to the fields that should be persisted.
    """
    picks = list(picks)
    statuses = compute_game_solo_statuses(picks)
    readiness = validate_game_for_scoring(game)
    winner = resolve_winner(game) if readiness.can_score else None

    if not readiness.can_score:
        logger.debug(f"Game {game.id} not ready for scoring ({readiness.reason})")
    elif winner is None:
        logger.debug(
            f"Game {game.id} tied {game.home_score}-{game.away_score}, all picks void"
        )

    fields: dict[PickId, PickFields] = {}
    for pick in picks:
        solo = statuses[pick.id]
        bonus = 0
        total = 0

        if winner is not None:
            is_correct = pick.picked_team == winner
            score = score_pick(is_correct, pick.is_lock, game.week, solo)
            bonus = score.bonus_points
            total = score.total_points
            logger.debug(
                f"Pick {pick.id}: "
                + score.breakdown(
                    week=game.week,
                    is_lock=pick.is_lock,
                    is_correct=is_correct,
                    solo=solo,
                )
                + f" (winner={winner}, pick={pick.picked_team})"
            )

        fields[pick.id] = PickFields(
            solo_pick=solo.is_solo_pick,
            solo_lock=solo.is_solo_lock,
            super_bonus=solo.is_solo_pick and solo.is_solo_lock and pick.is_lock,
            bonus_points=bonus,
            pick_points=total,
        )

    return fields
