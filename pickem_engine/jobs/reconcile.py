"""Scoring reconciliation sweep.

Safety net for picks whose persisted scoring drifted from the rules, for
example when a score update landed while a recomputation was failing. Every
completed game with both scores is audited, ties included, and any game with
at least one discrepancy is handed to the GameRecomputationJob.

Example:
    >>> from pickem_engine.data import SqlScoringStore
    >>> result = reconcile_scoring(SqlScoringStore(), season=2025)
    >>> print(f"Fixed {result.games_fixed}/{result.games_checked} games")
"""
from __future__ import annotations

from dataclasses import dataclass, field

from pickem_engine.jobs.recompute import GameRecomputationJob, RecomputeResult
from pickem_engine.logging import FAIL, SUCCESS, WARN, get_logger
from pickem_engine.scoring.validator import (
    find_scoring_discrepancies,
    validate_game_scoring,
)
from pickem_engine.types import GameId, ScoringStore, StoreError

logger = get_logger(__name__)


@dataclass
class ProblemGame:
    """A game whose persisted scoring did not match a recomputation."""

    game_id: GameId
    week: int
    matchup: str
    incorrect_picks: int
    issues: list[str] = field(default_factory=list)


@dataclass
class ReconcileResult:
    """Summary of one reconciliation sweep.

    Attributes:
        games_checked: Completed games audited.
        games_fixed: Games whose rerun wrote every pick.
        picks_fixed: Mismatching picks on fixed games.
        problem_games: Every game where a mismatch was found.
        failures: Recompute results of games that could not be fixed.
        errors: Games skipped because their picks could not be read.
    """

    games_checked: int = 0
    games_fixed: int = 0
    picks_fixed: int = 0
    problem_games: list[ProblemGame] = field(default_factory=list)
    failures: list[RecomputeResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures and not self.errors


class ScoringReconciler:
    """Audits completed games and repairs the ones that drifted.

    Attributes:
        store: Persistence boundary.
        job: Recomputation job used to repair games.
    """

    def __init__(
        self,
        store: ScoringStore,
        job: GameRecomputationJob | None = None,
    ) -> None:
        self.store = store
        self.job = job or GameRecomputationJob(store)

    def run(self, season: int | None = None) -> ReconcileResult:
        """Audit and repair completed games.

        Args:
            season: Restrict the sweep to one season; None checks all.

        Returns:
            ReconcileResult with counts and problem games.

        Raises:
            StoreError: If the list of completed games cannot be fetched.
        """
        scope = f"season {season}" if season is not None else "all seasons"
        logger.info(f"Looking for games with incorrect scoring ({scope})...")

        games = self.store.get_completed_games(season)
        result = ReconcileResult()

        if not games:
            logger.info("No completed games found")
            return result

        logger.info(f"Checking {len(games)} completed games...")

        for game in games:
            result.games_checked += 1
            try:
                picks = self.store.get_picks_for_game(game.id)
            except StoreError as e:
                logger.error(f"{FAIL} Error checking picks for game {game.id}: {e}")
                result.errors.append(f"{game.id}: {e}")
                continue

            discrepancies = find_scoring_discrepancies(game, picks)
            if not discrepancies:
                continue

            issues = validate_game_scoring(game, picks).issues
            issues.append(f"{len(discrepancies)} picks differ from recomputation")
            result.problem_games.append(
                ProblemGame(
                    game_id=game.id,
                    week=game.week,
                    matchup=game.matchup,
                    incorrect_picks=len(discrepancies),
                    issues=issues,
                )
            )
            logger.warning(
                f"{WARN} Incorrect scoring in game {game.id} (Week {game.week}): "
                + ", ".join(issues)
            )

            rerun = self.job.run(game.id)
            if rerun.complete:
                result.games_fixed += 1
                result.picks_fixed += len(discrepancies)
                logger.info(f"{SUCCESS} Fixed scoring for game {game.id}")
            else:
                result.failures.append(rerun)
                logger.error(
                    f"{FAIL} Failed to fix scoring for game {game.id}: "
                    f"{rerun.error or f'{rerun.error_count} pick write(s) failed'}"
                )

        logger.info(
            f"Reconciliation complete: {result.games_checked} checked, "
            f"{result.games_fixed} fixed, {result.picks_fixed} picks corrected"
        )
        return result


def reconcile_scoring(
    store: ScoringStore, season: int | None = None, **job_kwargs
) -> ReconcileResult:
    """Run a reconciliation sweep with a fresh job.

    Args:
        store: Persistence boundary.
        season: Restrict the sweep to one season.
        **job_kwargs: Passed to GameRecomputationJob.

    Returns:
        ReconcileResult summary.
    """
    job = GameRecomputationJob(store, **job_kwargs)
    return ScoringReconciler(store, job).run(season)
