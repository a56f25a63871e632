"""Type definitions and protocols for the scoring engine.

This module defines the identifier types, enums, immutable record types,
the store protocol and the exception hierarchy shared by the scoring,
job and awards layers. Records here are plain values detached from the ORM
so the scoring rules can be exercised without a database.

Example:
    >>> from pickem_engine.types import GameId, GameRecord, SeasonType, TeamId
    >>> game = GameRecord(id=GameId("g1"), week=5, season=2025,
    ...                   season_type=SeasonType.REGULAR,
    ...                   home_team=TeamId("KC"), away_team=TeamId("DEN"))
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any, NewType, Protocol

# =============================================================================
# Identifier Types
# =============================================================================

UserId = NewType("UserId", str)
TeamId = NewType("TeamId", str)
GameId = NewType("GameId", str)
PickId = NewType("PickId", str)


# =============================================================================
# Enums
# =============================================================================


class GameStatus(str, Enum):
    """Lifecycle status of a game."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class SeasonType(str, Enum):
    """Portion of the season a game belongs to."""

    PRESEASON = "preseason"
    REGULAR = "regular"
    PLAYOFFS = "playoffs"


class AwardType(str, Enum):
    """Weekly distinctions derived from pick results."""

    TOP_SCORER = "top_scorer"
    LOWEST_SCORER = "lowest_scorer"
    PERFECT_WEEK = "perfect_week"
    COLD_WEEK = "cold_week"


# =============================================================================
# Records
# =============================================================================


@dataclass(frozen=True)
class WeekKey:
    """Identifies one scoring week: (week, season, season_type)."""

    week: int
    season: int
    season_type: SeasonType = SeasonType.REGULAR

    def __str__(self) -> str:
        return f"Week {self.week} ({self.season_type.value} {self.season})"


@dataclass(frozen=True)
class GameRecord:
    """Immutable snapshot of a game as read from the store.

    Attributes:
        id: Game identifier.
        week: Week number (1-based).
        season: Season year.
        season_type: Preseason, regular or playoffs.
        home_team: Home team identifier.
        away_team: Away team identifier.
        home_score: Home score, None until the game has started.
        away_score: Away score, None until the game has started.
        status: Scheduled, in progress or completed.
        game_time: Kickoff time, used to order picks chronologically.
    """

    id: GameId
    week: int
    season: int
    season_type: SeasonType
    home_team: TeamId
    away_team: TeamId
    home_score: int | None = None
    away_score: int | None = None
    status: GameStatus = GameStatus.SCHEDULED
    game_time: datetime | None = None

    @property
    def week_key(self) -> WeekKey:
        return WeekKey(self.week, self.season, self.season_type)

    @property
    def matchup(self) -> str:
        return f"{self.away_team} @ {self.home_team}"

    @property
    def has_final_score(self) -> bool:
        """True when the game is completed and both scores are present."""
        return (
            self.status == GameStatus.COMPLETED
            and self.home_score is not None
            and self.away_score is not None
        )


@dataclass(frozen=True)
class PickFields:
    """The five pick columns owned and rewritten by the engine."""

    solo_pick: bool = False
    solo_lock: bool = False
    super_bonus: bool = False
    bonus_points: int = 0
    pick_points: int = 0

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PickRecord:
    """Immutable snapshot of a pick, including its persisted computed fields.

    ``picked_team`` and ``is_lock`` belong to the user; the remaining fields
    are written only by the recomputation job.
    """

    id: PickId
    user_id: UserId
    game_id: GameId
    picked_team: TeamId
    is_lock: bool = False
    solo_pick: bool = False
    solo_lock: bool = False
    super_bonus: bool = False
    bonus_points: int = 0
    pick_points: int = 0

    @property
    def fields(self) -> PickFields:
        """Currently persisted computed fields."""
        return PickFields(
            solo_pick=self.solo_pick,
            solo_lock=self.solo_lock,
            super_bonus=self.super_bonus,
            bonus_points=self.bonus_points,
            pick_points=self.pick_points,
        )


@dataclass(frozen=True)
class AwardCandidate:
    """A weekly award to be stored (or already stored) for one user.

    Attributes:
        user_id: Award recipient.
        week: Week number.
        season: Season year.
        season_type: Season type of the week.
        award_type: Kind of award.
        points: The user's total points for the week.
        record: The user's weekly "W-L" record, e.g. "5-1".
    """

    user_id: UserId
    week: int
    season: int
    season_type: SeasonType
    award_type: AwardType
    points: int
    record: str = "0-0"

    @property
    def week_key(self) -> WeekKey:
        return WeekKey(self.week, self.season, self.season_type)


# =============================================================================
# Protocols (Interfaces)
# =============================================================================


class ScoringStore(Protocol):
    """Persistence boundary used by the jobs and the awards processor.

    Implementations raise ``GameNotFoundError`` for unknown games and
    ``StoreError`` (or a subclass) for any failure of the underlying store.
    """

    def get_game(self, game_id: GameId) -> GameRecord:
        """Fetch a single game."""
        ...

    def get_picks_for_game(self, game_id: GameId) -> list[PickRecord]:
        """Fetch every pick made on a game."""
        ...

    def update_pick_fields(self, pick_id: PickId, fields: PickFields) -> None:
        """Overwrite the computed fields of one pick."""
        ...

    def get_completed_games(self, season: int | None = None) -> list[GameRecord]:
        """Fetch completed games that have both scores."""
        ...

    def get_week_keys(self, season: int) -> list[WeekKey]:
        """List the distinct weeks that have games in a season."""
        ...

    def get_week_games(self, key: WeekKey) -> list[GameRecord]:
        """Fetch all games of one week."""
        ...

    def get_week_picks(self, key: WeekKey) -> list[PickRecord]:
        """Fetch all picks on games of one week."""
        ...

    def get_season_games(self, season: int) -> list[GameRecord]:
        """Fetch all games of a season."""
        ...

    def get_season_picks(self, season: int) -> list[PickRecord]:
        """Fetch all picks on games of a season."""
        ...

    def has_week_awards(self, key: WeekKey) -> bool:
        """Whether any award exists for a week."""
        ...

    def get_week_awards(self, key: WeekKey) -> list[AwardCandidate]:
        """Fetch the stored awards of a week."""
        ...

    def replace_week_awards(
        self, key: WeekKey, awards: list[AwardCandidate]
    ) -> int:
        """Delete a week's awards and insert the given set atomically."""
        ...


# =============================================================================
# Exceptions
# =============================================================================


class PickemEngineError(Exception):
    """Base exception for scoring engine errors."""


class NotFoundError(PickemEngineError):
    """A referenced record does not exist."""


class GameNotFoundError(NotFoundError):
    """Requested game not found."""

    def __init__(self, game_id: str) -> None:
        self.game_id = game_id
        super().__init__(f"Game not found: {game_id}")


class PickNotFoundError(NotFoundError):
    """Requested pick not found."""

    def __init__(self, pick_id: str) -> None:
        self.pick_id = pick_id
        super().__init__(f"Pick not found: {pick_id}")


class StoreError(PickemEngineError):
    """The persistence store failed to execute a call."""


class StoreUnavailableError(StoreError):
    """The store could not be reached or a call timed out."""
