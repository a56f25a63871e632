"""Store-backed weekly awards processing.

Wraps the pure aggregator with the store calls needed to run it for real:
reading a week's games and picks, replacing the week's stored awards in one
transaction, and sweeping a season for weeks whose games are all final.

Example:
    >>> from pickem_engine.data import SqlScoringStore
    >>> processor = WeeklyAwardsProcessor(SqlScoringStore())
    >>> result = processor.process_week(WeekKey(5, 2025))
    >>> print(result.awards_created)
"""
from __future__ import annotations

from dataclasses import dataclass, field

from pickem_engine.awards.aggregator import compute_weekly_awards
from pickem_engine.logging import FAIL, SUCCESS, get_logger
from pickem_engine.types import (
    AwardCandidate,
    GameStatus,
    PickemEngineError,
    ScoringStore,
    WeekKey,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class WeekCompletion:
    """How many of a week's games are completed."""

    total_games: int
    completed_games: int

    @property
    def all_completed(self) -> bool:
        """True when the week has games and every one is completed."""
        return self.total_games > 0 and self.completed_games == self.total_games


@dataclass
class AwardsRunResult:
    """Outcome of processing awards for one week.

    Attributes:
        key: Week that was processed.
        success: False when a store call failed.
        awards: Computed award candidates.
        awards_created: Rows written (0 for dry runs and failures).
        dry_run: True when nothing was written.
        error: Error message when success is False.
    """

    key: WeekKey
    success: bool = True
    awards: list[AwardCandidate] = field(default_factory=list)
    awards_created: int = 0
    dry_run: bool = False
    error: str | None = None


@dataclass
class AwardsSweepResult:
    """Outcome of sweeping a season for completed weeks.

    Attributes:
        season: Season swept.
        processed: Results of weeks that were processed.
        skipped: (week, reason) for weeks left untouched.
        error: Set when the season's weeks could not be listed.
    """

    season: int
    processed: list[AwardsRunResult] = field(default_factory=list)
    skipped: list[tuple[WeekKey, str]] = field(default_factory=list)
    error: str | None = None

    @property
    def failures(self) -> list[AwardsRunResult]:
        return [r for r in self.processed if not r.success]

    @property
    def success(self) -> bool:
        return self.error is None and not self.failures

    @property
    def message(self) -> str:
        created = [r for r in self.processed if r.success]
        if created:
            return f"Processed awards for {len(created)} completed week(s)"
        return "No completed weeks found that need award processing"


class WeeklyAwardsProcessor:
    """Computes and stores weekly awards.

    Attributes:
        store: Persistence boundary.
    """

    def __init__(self, store: ScoringStore) -> None:
        self.store = store

    def check_week_completion(self, key: WeekKey) -> WeekCompletion:
        """Count a week's games and how many are completed.

        Raises:
            StoreError: If the week's games cannot be read.
        """
        games = self.store.get_week_games(key)
        completed = sum(1 for g in games if g.status == GameStatus.COMPLETED)
        return WeekCompletion(total_games=len(games), completed_games=completed)

    def process_week(self, key: WeekKey, dry_run: bool = False) -> AwardsRunResult:
        """Compute a week's awards and, unless dry_run, replace the stored set.

        Dry runs recompute points from game state so operators can preview
        awards before the recomputation job has caught up.

        Args:
            key: Week to process.
            dry_run: Compute only; do not write.

        Returns:
            AwardsRunResult; store failures are reported, not raised.
        """
        result = AwardsRunResult(key=key, dry_run=dry_run)
        try:
            games = self.store.get_week_games(key)
            picks = self.store.get_week_picks(key)
            result.awards = compute_weekly_awards(
                key.week,
                key.season,
                key.season_type,
                picks,
                games,
                preview=dry_run,
            )
            if dry_run:
                logger.info(f"{key}: dry run computed {len(result.awards)} award(s)")
                return result
            result.awards_created = self.store.replace_week_awards(key, result.awards)
        except PickemEngineError as e:
            logger.error(f"{FAIL} Failed to process awards for {key}: {e}")
            result.success = False
            result.error = str(e)
            return result

        logger.info(f"{SUCCESS} Created {result.awards_created} award(s) for {key}")
        return result

    def process_completed_weeks(
        self, season: int, force: bool = False
    ) -> AwardsSweepResult:
        """Process awards for every fully completed week of a season.

        Weeks with unfinished games are skipped. Weeks that already have
        awards are skipped unless ``force`` is set.

        Args:
            season: Season to sweep.
            force: Reprocess weeks that already have awards.

        Returns:
            AwardsSweepResult describing each week's fate.
        """
        sweep = AwardsSweepResult(season=season)
        logger.info(f"Checking season {season} for completed weeks...")

        try:
            keys = self.store.get_week_keys(season)
        except PickemEngineError as e:
            logger.error(f"{FAIL} Failed to list weeks for season {season}: {e}")
            sweep.error = str(e)
            return sweep

        for key in keys:
            try:
                completion = self.check_week_completion(key)
                already_done = not force and self.store.has_week_awards(key)
            except PickemEngineError as e:
                logger.error(f"{FAIL} Error checking {key}: {e}")
                sweep.processed.append(
                    AwardsRunResult(key=key, success=False, error=str(e))
                )
                continue

            if not completion.all_completed:
                reason = (
                    f"{completion.completed_games}/{completion.total_games} "
                    "games completed"
                )
                logger.info(f"{key} not completed: {reason}")
                sweep.skipped.append((key, reason))
                continue

            if already_done:
                logger.info(f"{key} awards already processed")
                sweep.skipped.append((key, "Awards already processed"))
                continue

            sweep.processed.append(self.process_week(key))

        logger.info(sweep.message)
        return sweep
