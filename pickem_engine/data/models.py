"""SQLAlchemy ORM models for pick'em data.

This module defines the database models for games, user picks and weekly
awards. Games and the user-facing pick columns are written by external
collaborators (score sync, pick management); the engine only rewrites the
computed pick columns and the awards table.

Example:
    >>> from pickem_engine.data.models import Game, Pick
    >>> from pickem_engine.data.db import session_scope
    >>> with session_scope() as session:
    ...     game = session.get(Game, "g-101")
    ...     print(game.matchup)
"""
from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pickem_engine.data.schema import Base, TimestampMixin, WeekMixin
from pickem_engine.types import (
    AwardCandidate,
    AwardType,
    GameId,
    GameRecord,
    GameStatus,
    PickId,
    PickRecord,
    SeasonType,
    TeamId,
    UserId,
)


def _new_id() -> str:
    return str(uuid.uuid4())


# =============================================================================
# Game Models
# =============================================================================


class Game(WeekMixin, TimestampMixin, Base):
    """Scheduled contest between two teams.

    Attributes:
        id: Game identifier (UUID string).
        week: Week number within the season type.
        season: Season year.
        season_type: 'preseason', 'regular' or 'playoffs'.
        home_team: Home team identifier (free text, e.g. "KC").
        away_team: Away team identifier.
        home_score: Home score, null until the game starts.
        away_score: Away score, null until the game starts.
        status: 'scheduled', 'in_progress' or 'completed'.
        game_time: Scheduled kickoff.
        picks: Relationship to all picks on this game.
    """

    __tablename__ = "games"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    home_team: Mapped[str] = mapped_column(String(50), nullable=False)
    away_team: Mapped[str] = mapped_column(String(50), nullable=False)
    home_score: Mapped[int | None] = mapped_column(nullable=True)
    away_score: Mapped[int | None] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=GameStatus.SCHEDULED.value
    )
    game_time: Mapped[datetime | None] = mapped_column(nullable=True)

    # Relationships
    picks: Mapped[list[Pick]] = relationship(
        back_populates="game", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("week >= 1", name="ck_game_week_positive"),
        CheckConstraint("home_team <> away_team", name="ck_game_distinct_teams"),
        CheckConstraint(
            "status IN ('scheduled', 'in_progress', 'completed')",
            name="ck_game_status",
        ),
        CheckConstraint(
            "season_type IN ('preseason', 'regular', 'playoffs')",
            name="ck_game_season_type",
        ),
        Index("idx_games_week", "season", "season_type", "week"),
        Index("idx_games_status", "status"),
    )

    @property
    def matchup(self) -> str:
        return f"{self.away_team} @ {self.home_team}"

    def to_record(self) -> GameRecord:
        """Convert to an immutable GameRecord."""
        return GameRecord(
            id=GameId(self.id),
            week=self.week,
            season=self.season,
            season_type=SeasonType(self.season_type),
            home_team=TeamId(self.home_team),
            away_team=TeamId(self.away_team),
            home_score=self.home_score,
            away_score=self.away_score,
            status=GameStatus(self.status),
            game_time=self.game_time,
        )

    def __repr__(self) -> str:
        return f"<Game(id={self.id!r}, week={self.week}, matchup={self.matchup!r})>"


# =============================================================================
# Pick Models
# =============================================================================


class Pick(TimestampMixin, Base):
    """One user's selection for one game.

    Attributes:
        id: Pick identifier (UUID string).
        user_id: Owning user.
        game_id: Foreign key to games.
        picked_team: Team the user picked; one of the game's two teams.
        is_lock: Whether the user locked this pick (double stakes).
        solo_pick: Only pick on this team in the game (computed).
        solo_lock: Only lock on this team in the game (computed).
        super_bonus: Lock that is also a solo pick (computed).
        bonus_points: Bonus portion of pick_points (computed).
        pick_points: Total points earned by the pick (computed).
    """

    __tablename__ = "picks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    game_id: Mapped[str] = mapped_column(
        ForeignKey("games.id", ondelete="CASCADE"), nullable=False
    )
    picked_team: Mapped[str] = mapped_column(String(50), nullable=False)
    is_lock: Mapped[bool] = mapped_column(nullable=False, default=False)

    # Computed by the recomputation job
    solo_pick: Mapped[bool] = mapped_column(nullable=False, default=False)
    solo_lock: Mapped[bool] = mapped_column(nullable=False, default=False)
    super_bonus: Mapped[bool] = mapped_column(nullable=False, default=False)
    bonus_points: Mapped[int] = mapped_column(nullable=False, default=0)
    pick_points: Mapped[int] = mapped_column(nullable=False, default=0)

    # Relationships
    game: Mapped[Game] = relationship(back_populates="picks")

    __table_args__ = (
        UniqueConstraint("user_id", "game_id", name="uq_pick_user_game"),
        CheckConstraint("bonus_points >= 0", name="ck_pick_bonus_nonnegative"),
        Index("idx_picks_game", "game_id"),
        Index("idx_picks_user", "user_id"),
    )

    def to_record(self) -> PickRecord:
        """Convert to an immutable PickRecord."""
        return PickRecord(
            id=PickId(self.id),
            user_id=UserId(self.user_id),
            game_id=GameId(self.game_id),
            picked_team=TeamId(self.picked_team),
            is_lock=bool(self.is_lock),
            solo_pick=bool(self.solo_pick),
            solo_lock=bool(self.solo_lock),
            super_bonus=bool(self.super_bonus),
            bonus_points=self.bonus_points,
            pick_points=self.pick_points,
        )

    def __repr__(self) -> str:
        return (
            f"<Pick(id={self.id!r}, user_id={self.user_id!r}, "
            f"picked_team={self.picked_team!r}, is_lock={self.is_lock})>"
        )


# =============================================================================
# Award Models
# =============================================================================


class Award(WeekMixin, TimestampMixin, Base):
    """Weekly distinction earned by a user.

    Rows are only created by the awards processor, which replaces a week's
    rows as a whole when it reprocesses that week.

    Attributes:
        id: Auto-increment primary key.
        user_id: Award recipient.
        week: Week number.
        season: Season year.
        season_type: Season type of the week.
        award_type: 'top_scorer', 'lowest_scorer', 'perfect_week' or 'cold_week'.
        points: User's total points for the week.
        record: User's weekly "W-L" record.
    """

    __tablename__ = "awards"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    award_type: Mapped[str] = mapped_column(String(20), nullable=False)
    points: Mapped[int] = mapped_column(nullable=False, default=0)
    record: Mapped[str] = mapped_column(String(20), nullable=False, default="0-0")

    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "week",
            "season",
            "season_type",
            "award_type",
            name="uq_award_user_week_type",
        ),
        Index("idx_awards_week", "season", "season_type", "week"),
    )

    @classmethod
    def from_candidate(cls, candidate: AwardCandidate) -> Award:
        """Build an ORM row from a computed award."""
        return cls(
            user_id=candidate.user_id,
            week=candidate.week,
            season=candidate.season,
            season_type=candidate.season_type.value,
            award_type=candidate.award_type.value,
            points=candidate.points,
            record=candidate.record,
        )

    def to_candidate(self) -> AwardCandidate:
        """Convert to an immutable AwardCandidate."""
        return AwardCandidate(
            user_id=UserId(self.user_id),
            week=self.week,
            season=self.season,
            season_type=SeasonType(self.season_type),
            award_type=AwardType(self.award_type),
            points=self.points,
            record=self.record,
        )

    def __repr__(self) -> str:
        return (
            f"<Award(user_id={self.user_id!r}, week={self.week}, "
            f"award_type={self.award_type!r})>"
        )
