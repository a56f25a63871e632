"""Store-backed scoring jobs.

Submodules:
    retry: Bounded retry for transient store failures
    recompute: Per-game recomputation of pick scoring
    reconcile: Sweep that repairs drifted scoring
"""
from __future__ import annotations

from pickem_engine.jobs.recompute import (
    SKIP_NO_PICKS,
    SKIP_NOT_STARTED,
    GameRecomputationJob,
    RecomputeResult,
    recompute_game,
    recompute_games,
)
from pickem_engine.jobs.reconcile import (
    ProblemGame,
    ReconcileResult,
    ScoringReconciler,
    reconcile_scoring,
)
from pickem_engine.jobs.retry import (
    TRANSIENT_ERRORS,
    RetryExhaustedError,
    RetryResult,
    call_with_retry,
)

__all__ = [
    "GameRecomputationJob",
    "RecomputeResult",
    "SKIP_NOT_STARTED",
    "SKIP_NO_PICKS",
    "recompute_game",
    "recompute_games",
    "ProblemGame",
    "ReconcileResult",
    "ScoringReconciler",
    "reconcile_scoring",
    "TRANSIENT_ERRORS",
    "RetryExhaustedError",
    "RetryResult",
    "call_with_retry",
]
