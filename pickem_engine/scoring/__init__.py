"""Pure scoring rules.

Submodules:
    outcome: Winner resolution and scoring readiness
    solo: Solo pick / solo lock detection
    points: Base and bonus point rules
    engine: Per-game composition of the above
    validator: Audit of persisted scoring

Example:
    >>> from pickem_engine.scoring import compute_game_fields
    >>> fields = compute_game_fields(game, picks)
"""
from __future__ import annotations

from pickem_engine.scoring.engine import compute_game_fields
from pickem_engine.scoring.outcome import (
    ScoringReadiness,
    is_tie,
    resolve_winner,
    validate_game_for_scoring,
)
from pickem_engine.scoring.points import (
    BONUS_START_WEEK,
    POSSIBLE_TOTALS,
    PickScore,
    score_pick,
)
from pickem_engine.scoring.solo import (
    SoloStatus,
    compute_game_solo_statuses,
    compute_solo_status,
)
from pickem_engine.scoring.validator import (
    ScoringDiscrepancy,
    ScoringValidation,
    find_scoring_discrepancies,
    validate_game_scoring,
)

__all__ = [
    # Outcome
    "ScoringReadiness",
    "is_tie",
    "resolve_winner",
    "validate_game_for_scoring",
    # Solo status
    "SoloStatus",
    "compute_game_solo_statuses",
    "compute_solo_status",
    # Points
    "BONUS_START_WEEK",
    "POSSIBLE_TOTALS",
    "PickScore",
    "score_pick",
    # Composition
    "compute_game_fields",
    # Validation
    "ScoringDiscrepancy",
    "ScoringValidation",
    "find_scoring_discrepancies",
    "validate_game_scoring",
]
