"""SQLAlchemy-backed implementation of the ScoringStore protocol.

Every call runs in its own short transaction so per-pick writes are
independent of each other, and returns immutable records rather than live
ORM objects. Store failures are translated into the engine's exception
hierarchy: connectivity and timeout problems become StoreUnavailableError,
anything else raised by SQLAlchemy becomes StoreError.

Example:
    >>> from pickem_engine.data.store import SqlScoringStore
    >>> store = SqlScoringStore()
    >>> game = store.get_game("g-101")
    >>> picks = store.get_picks_for_game(game.id)
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from contextlib import AbstractContextManager, contextmanager

from sqlalchemy import delete, select, update
from sqlalchemy.exc import (
    DisconnectionError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from pickem_engine.data.db import session_scope
from pickem_engine.data.models import Award, Game, Pick
from pickem_engine.types import (
    AwardCandidate,
    GameId,
    GameNotFoundError,
    GameRecord,
    GameStatus,
    PickFields,
    PickId,
    PickNotFoundError,
    PickRecord,
    SeasonType,
    StoreError,
    StoreUnavailableError,
    WeekKey,
)

logger = logging.getLogger(__name__)

UNAVAILABLE_ERRORS = (
    OperationalError,
    PoolTimeoutError,
    DisconnectionError,
    InterfaceError,
)


class SqlScoringStore:
    """ScoringStore backed by the engine's SQLAlchemy session factory.

    Attributes:
        scope: Callable returning a transactional session context manager.
    """

    def __init__(
        self,
        scope: Callable[[], AbstractContextManager[Session]] = session_scope,
    ) -> None:
        self.scope = scope

    @contextmanager
    def _transaction(self, operation: str) -> Generator[Session, None, None]:
        """Run one store call, translating SQLAlchemy failures."""
        try:
            with self.scope() as session:
                yield session
        except UNAVAILABLE_ERRORS as e:
            logger.warning(f"Store unavailable during {operation}: {e}")
            raise StoreUnavailableError(f"{operation} failed: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Store error during {operation}: {e}")
            raise StoreError(f"{operation} failed: {e}") from e

    # ==================== Games ====================

    def get_game(self, game_id: GameId) -> GameRecord:
        with self._transaction("get_game") as session:
            game = session.get(Game, game_id)
            if game is None:
                raise GameNotFoundError(game_id)
            return game.to_record()

    def get_completed_games(self, season: int | None = None) -> list[GameRecord]:
        stmt = (
            select(Game)
            .where(Game.status == GameStatus.COMPLETED.value)
            .where(Game.home_score.is_not(None))
            .where(Game.away_score.is_not(None))
            .order_by(Game.season, Game.season_type, Game.week, Game.game_time)
        )
        if season is not None:
            stmt = stmt.where(Game.season == season)
        with self._transaction("get_completed_games") as session:
            return [g.to_record() for g in session.scalars(stmt)]

    def get_week_keys(self, season: int) -> list[WeekKey]:
        stmt = (
            select(Game.week, Game.season, Game.season_type)
            .where(Game.season == season)
            .distinct()
            .order_by(Game.season_type, Game.week)
        )
        with self._transaction("get_week_keys") as session:
            return [
                WeekKey(week, season_, SeasonType(season_type))
                for week, season_, season_type in session.execute(stmt)
            ]

    def get_week_games(self, key: WeekKey) -> list[GameRecord]:
        stmt = _week_filter(select(Game), key).order_by(Game.game_time, Game.id)
        with self._transaction("get_week_games") as session:
            return [g.to_record() for g in session.scalars(stmt)]

    def get_season_games(self, season: int) -> list[GameRecord]:
        stmt = (
            select(Game)
            .where(Game.season == season)
            .order_by(Game.game_time, Game.id)
        )
        with self._transaction("get_season_games") as session:
            return [g.to_record() for g in session.scalars(stmt)]

    # ==================== Picks ====================

    def get_picks_for_game(self, game_id: GameId) -> list[PickRecord]:
        stmt = select(Pick).where(Pick.game_id == game_id).order_by(Pick.id)
        with self._transaction("get_picks_for_game") as session:
            return [p.to_record() for p in session.scalars(stmt)]

    def get_week_picks(self, key: WeekKey) -> list[PickRecord]:
        stmt = _week_filter(select(Pick).join(Pick.game), key).order_by(Pick.id)
        with self._transaction("get_week_picks") as session:
            return [p.to_record() for p in session.scalars(stmt)]

    def get_season_picks(self, season: int) -> list[PickRecord]:
        stmt = (
            select(Pick)
            .join(Pick.game)
            .where(Game.season == season)
            .order_by(Pick.id)
        )
        with self._transaction("get_season_picks") as session:
            return [p.to_record() for p in session.scalars(stmt)]

    def update_pick_fields(self, pick_id: PickId, fields: PickFields) -> None:
        stmt = update(Pick).where(Pick.id == pick_id).values(**fields.as_dict())
        with self._transaction("update_pick_fields") as session:
            result = session.execute(stmt)
            if result.rowcount == 0:
                raise PickNotFoundError(pick_id)

    # ==================== Awards ====================

    def has_week_awards(self, key: WeekKey) -> bool:
        stmt = _week_filter(select(Award.id), key, model=Award).limit(1)
        with self._transaction("has_week_awards") as session:
            return session.scalars(stmt).first() is not None

    def get_week_awards(self, key: WeekKey) -> list[AwardCandidate]:
        stmt = _week_filter(select(Award), key, model=Award).order_by(
            Award.award_type, Award.points.desc(), Award.user_id
        )
        with self._transaction("get_week_awards") as session:
            return [a.to_candidate() for a in session.scalars(stmt)]

    def replace_week_awards(
        self, key: WeekKey, awards: list[AwardCandidate]
    ) -> int:
        """Delete a week's awards and insert the new set in one transaction."""
        with self._transaction("replace_week_awards") as session:
            deleted = session.execute(
                _week_filter(delete(Award), key, model=Award)
            ).rowcount
            session.add_all(Award.from_candidate(a) for a in awards)
            logger.debug(
                f"{key}: replaced {deleted} award(s) with {len(awards)} new award(s)"
            )
            return len(awards)


def _week_filter(stmt, key: WeekKey, model: type = Game):
    """Restrict a statement to one (week, season, season_type)."""
    return (
        stmt.where(model.week == key.week)
        .where(model.season == key.season)
        .where(model.season_type == key.season_type.value)
    )
