"""Game recomputation job.

Re-derives the five engine-owned fields (solo_pick, solo_lock, super_bonus,
bonus_points, pick_points) for every pick on one game and writes them back.

Steps per run:
1. Fetch the game (missing game is fatal, store failures are retried)
2. Skip scheduled games, since picks can still change
3. Fetch the game's picks, skip if there are none
4. Compute solo statuses and points (see pickem_engine.scoring)
5. Persist each pick independently, counting failures

The fetch phase (steps 1-3) runs inside a bounded retry. Per-pick write
failures are not retried; they are reported so a later run can repair them.
Runs are idempotent: the same game and picks always yield the same fields.

Example:
    >>> from pickem_engine.data import SqlScoringStore
    >>> job = GameRecomputationJob(SqlScoringStore())
    >>> result = job.run("g-101")
    >>> print(result.success_count, result.error_count)
"""
from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from pickem_engine.config import get_settings
from pickem_engine.logging import FAIL, get_logger, status_tag
from pickem_engine.jobs.retry import (
    TRANSIENT_ERRORS,
    RetryExhaustedError,
    call_with_retry,
)
from pickem_engine.scoring.engine import compute_game_fields
from pickem_engine.types import (
    GameId,
    GameNotFoundError,
    GameRecord,
    GameStatus,
    NotFoundError,
    PickRecord,
    ScoringStore,
)

logger = get_logger(__name__)

SKIP_NOT_STARTED = "Game not started"
SKIP_NO_PICKS = "No picks"


@dataclass
class RecomputeResult:
    """Outcome of recomputing one game.

    Attributes:
        success: False only when the game could not be fetched.
        game_id: Game that was processed.
        week: Week of the game, when it was fetched.
        total_picks: Number of picks on the game.
        success_count: Picks persisted successfully.
        error_count: Picks whose write failed.
        skipped: True when the game was intentionally not scored.
        reason: Why the game was skipped.
        error: Last error message when success is False.
        not_found: True when the game does not exist.
        attempts: Fetch attempts used.
        pick_errors: (pick_id, message) for each failed write.
    """

    success: bool
    game_id: str
    week: int | None = None
    total_picks: int = 0
    success_count: int = 0
    error_count: int = 0
    skipped: bool = False
    reason: str | None = None
    error: str | None = None
    not_found: bool = False
    attempts: int = 0
    pick_errors: list[tuple[str, str]] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """True if the run succeeded and every pick was written."""
        return self.success and self.error_count == 0


@dataclass(frozen=True)
class _FetchedGame:
    game: GameRecord
    picks: list[PickRecord]


class GameRecomputationJob:
    """Recomputes and persists pick scoring for single games.

    Attributes:
        store: Persistence boundary.
        max_attempts: Total fetch attempts per run.
        retry_delay: Seconds between fetch attempts.
        sleep: Wait function used between attempts.
    """

    def __init__(
        self,
        store: ScoringStore,
        max_attempts: int | None = None,
        retry_delay: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        settings = get_settings()
        self.store = store
        self.max_attempts = (
            max_attempts if max_attempts is not None else settings.fetch_attempts
        )
        self.retry_delay = (
            retry_delay if retry_delay is not None else settings.retry_delay
        )
        self.sleep = sleep

    def run(self, game_id: GameId | str) -> RecomputeResult:
        """Recompute all picks on one game.

        Never raises: missing games, store failures and unexpected errors
        are all reported in the returned RecomputeResult.

        Args:
            game_id: Game to recompute.

        Returns:
            RecomputeResult describing what happened.
        """
        game_id = GameId(str(game_id))

        try:
            fetched = call_with_retry(
                lambda: self._fetch(game_id),
                attempts=self.max_attempts,
                delay=self.retry_delay,
                sleep=self.sleep,
                description=f"Fetching game {game_id}",
            )
        except GameNotFoundError as e:
            logger.error(f"{FAIL} {e}")
            return RecomputeResult(
                success=False,
                game_id=game_id,
                error=str(e),
                not_found=True,
                attempts=1,
            )
        except RetryExhaustedError as e:
            logger.error(
                f"{FAIL} Failed to recompute game {game_id} after "
                f"{e.attempts} attempts: {e.last_error}"
            )
            return RecomputeResult(
                success=False,
                game_id=game_id,
                error=str(e.last_error),
                attempts=e.attempts,
            )
        except Exception as e:
            # Unexpected errors are not retried
            logger.error(f"{FAIL} Unexpected error fetching game {game_id}: {e!r}")
            return RecomputeResult(
                success=False,
                game_id=game_id,
                error=str(e) or type(e).__name__,
                attempts=1,
            )

        game = fetched.value.game
        picks = fetched.value.picks

        if game.status == GameStatus.SCHEDULED:
            logger.info(f"Game {game_id} is {game.status.value}, skipping scoring")
            return RecomputeResult(
                success=True,
                game_id=game_id,
                week=game.week,
                skipped=True,
                reason=SKIP_NOT_STARTED,
                attempts=fetched.attempts,
            )

        if not picks:
            logger.info(f"No picks found for game {game_id}")
            return RecomputeResult(
                success=True,
                game_id=game_id,
                week=game.week,
                skipped=True,
                reason=SKIP_NO_PICKS,
                attempts=fetched.attempts,
            )

        result = RecomputeResult(
            success=True,
            game_id=game_id,
            week=game.week,
            total_picks=len(picks),
            attempts=fetched.attempts,
        )

        for pick_id, fields in compute_game_fields(game, picks).items():
            try:
                self.store.update_pick_fields(pick_id, fields)
            except (NotFoundError, *TRANSIENT_ERRORS) as e:
                logger.error(f"{FAIL} Error updating pick {pick_id}: {e}")
                result.error_count += 1
                result.pick_errors.append((pick_id, str(e)))
            except Exception as e:
                logger.error(f"{FAIL} Unexpected error updating pick {pick_id}: {e!r}")
                result.error_count += 1
                result.pick_errors.append((pick_id, str(e) or type(e).__name__))
            else:
                result.success_count += 1

        logger.info(
            f"{status_tag(result.complete)} Updated picks for game {game_id} "
            f"(Week {game.week}): {result.success_count} successful, "
            f"{result.error_count} failed"
        )
        return result

    def run_many(self, game_ids: Iterable[GameId | str]) -> list[RecomputeResult]:
        """Recompute several games one after another."""
        return [self.run(game_id) for game_id in game_ids]

    def _fetch(self, game_id: GameId) -> _FetchedGame:
        """Fetch a game and, once it has started, its picks."""
        game = self.store.get_game(game_id)
        if game.status == GameStatus.SCHEDULED:
            return _FetchedGame(game=game, picks=[])
        return _FetchedGame(game=game, picks=self.store.get_picks_for_game(game_id))


def recompute_game(
    game_id: GameId | str,
    store: ScoringStore | None = None,
    **job_kwargs,
) -> RecomputeResult:
    """Recompute one game with a default SQL-backed store.

    Args:
        game_id: Game to recompute.
        store: Store to use; defaults to SqlScoringStore().
        **job_kwargs: Passed to GameRecomputationJob.

    Returns:
        RecomputeResult for the game.
    """
    if store is None:
        from pickem_engine.data.store import SqlScoringStore

        store = SqlScoringStore()
    return GameRecomputationJob(store, **job_kwargs).run(game_id)


def recompute_games(
    game_ids: Iterable[GameId | str],
    store: ScoringStore | None = None,
    **job_kwargs,
) -> list[RecomputeResult]:
    """Recompute several games sequentially, one result per game."""
    if store is None:
        from pickem_engine.data.store import SqlScoringStore

        store = SqlScoringStore()
    return GameRecomputationJob(store, **job_kwargs).run_many(game_ids)
