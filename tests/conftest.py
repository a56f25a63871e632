"""Shared pytest fixtures for scoring engine tests.

This module contains fixtures used across multiple test modules:
- Configuration fixtures (test settings pointing at a temporary database)
- Record factories (games and picks)
- An in-memory ScoringStore for job and awards tests
- A SQLite-backed store for data layer and integration tests

Example:
    def test_something(make_game, make_pick, memory_store):
        game = make_game("g1", home_score=24, away_score=17)
        store = memory_store([game], [make_pick("p1", "u1", "g1", "KC")])
"""
from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Generator

import pytest

from pickem_engine.config import Settings, reset_settings
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
    TeamId,
    UserId,
    WeekKey,
)


# =============================================================================
# Paths
# =============================================================================


@pytest.fixture
def tmp_data_dir(tmp_path: Path) -> Path:
    """Create and return temporary data directory."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def test_settings(tmp_data_dir: Path) -> Generator[Settings, None, None]:
    """Provide test settings with temporary directories.

    Automatically resets settings singleton after test.
    """
    import os

    # Set environment variables for test
    os.environ["PICKEM_DB_PATH"] = str(tmp_data_dir / "test.db")
    os.environ["LOG_DIR"] = str(tmp_data_dir / "logs")
    os.environ["LOG_LEVEL"] = "DEBUG"
    os.environ["PICKEM_RETRY_DELAY"] = "0"

    reset_settings()
    from pickem_engine.config import get_settings

    settings = get_settings()
    settings.ensure_directories()

    yield settings

    # Cleanup
    reset_settings()
    for key in ["PICKEM_DB_PATH", "LOG_DIR", "LOG_LEVEL", "PICKEM_RETRY_DELAY"]:
        os.environ.pop(key, None)


# =============================================================================
# Record Factories
# =============================================================================


KICKOFF = datetime(2025, 9, 7, 13, 0, 0)


def _make_game(
    game_id: str = "g1",
    week: int = 5,
    home_team: str = "KC",
    away_team: str = "DEN",
    home_score: int | None = None,
    away_score: int | None = None,
    status: GameStatus = GameStatus.COMPLETED,
    season: int = 2025,
    season_type: SeasonType = SeasonType.REGULAR,
    game_time: datetime | None = KICKOFF,
) -> GameRecord:
    return GameRecord(
        id=GameId(game_id),
        week=week,
        season=season,
        season_type=season_type,
        home_team=TeamId(home_team),
        away_team=TeamId(away_team),
        home_score=home_score,
        away_score=away_score,
        status=status,
        game_time=game_time,
    )


def _make_pick(
    pick_id: str,
    user_id: str,
    game_id: str,
    picked_team: str,
    is_lock: bool = False,
    **fields: Any,
) -> PickRecord:
    return PickRecord(
        id=PickId(pick_id),
        user_id=UserId(user_id),
        game_id=GameId(game_id),
        picked_team=TeamId(picked_team),
        is_lock=is_lock,
        **fields,
    )


@pytest.fixture
def make_game() -> Callable[..., GameRecord]:
    """Factory for GameRecord; defaults to a completed week 5 KC vs DEN game."""
    return _make_game


@pytest.fixture
def make_pick() -> Callable[..., PickRecord]:
    """Factory for PickRecord(pick_id, user_id, game_id, picked_team, is_lock)."""
    return _make_pick


@pytest.fixture
def kickoff() -> datetime:
    """Return a fixed kickoff time for deterministic ordering."""
    return KICKOFF


@pytest.fixture
def hours() -> Callable[[int], datetime]:
    """Return kickoff offset by a number of hours."""
    return lambda n: KICKOFF + timedelta(hours=n)


# =============================================================================
# Stores
# =============================================================================


class InMemoryStore:
    """Dictionary-backed ScoringStore used to drive jobs without a database."""

    def __init__(
        self,
        games: Iterable[GameRecord] = (),
        picks: Iterable[PickRecord] = (),
    ) -> None:
        self.games: dict[GameId, GameRecord] = {g.id: g for g in games}
        self.picks: dict[PickId, PickRecord] = {p.id: p for p in picks}
        self.awards: dict[WeekKey, list[AwardCandidate]] = {}
        self.updates: list[tuple[PickId, PickFields]] = []

    def get_game(self, game_id: GameId) -> GameRecord:
        if game_id not in self.games:
            raise GameNotFoundError(game_id)
        return self.games[game_id]

    def get_picks_for_game(self, game_id: GameId) -> list[PickRecord]:
        return sorted(
            (p for p in self.picks.values() if p.game_id == game_id),
            key=lambda p: p.id,
        )

    def update_pick_fields(self, pick_id: PickId, fields: PickFields) -> None:
        if pick_id not in self.picks:
            raise PickNotFoundError(pick_id)
        self.picks[pick_id] = dataclasses.replace(
            self.picks[pick_id], **fields.as_dict()
        )
        self.updates.append((pick_id, fields))

    def get_completed_games(self, season: int | None = None) -> list[GameRecord]:
        return [
            g
            for g in self.games.values()
            if g.has_final_score and (season is None or g.season == season)
        ]

    def get_week_keys(self, season: int) -> list[WeekKey]:
        keys = {g.week_key for g in self.games.values() if g.season == season}
        return sorted(keys, key=lambda k: (k.season_type.value, k.week))

    def get_week_games(self, key: WeekKey) -> list[GameRecord]:
        return [g for g in self.games.values() if g.week_key == key]

    def get_week_picks(self, key: WeekKey) -> list[PickRecord]:
        ids = {g.id for g in self.get_week_games(key)}
        return [p for p in self.picks.values() if p.game_id in ids]

    def get_season_games(self, season: int) -> list[GameRecord]:
        return [g for g in self.games.values() if g.season == season]

    def get_season_picks(self, season: int) -> list[PickRecord]:
        ids = {g.id for g in self.get_season_games(season)}
        return [p for p in self.picks.values() if p.game_id in ids]

    def has_week_awards(self, key: WeekKey) -> bool:
        return bool(self.awards.get(key))

    def get_week_awards(self, key: WeekKey) -> list[AwardCandidate]:
        return list(self.awards.get(key, []))

    def replace_week_awards(
        self, key: WeekKey, awards: list[AwardCandidate]
    ) -> int:
        self.awards[key] = list(awards)
        return len(awards)


@pytest.fixture
def memory_store() -> Callable[..., InMemoryStore]:
    """Factory for an InMemoryStore seeded with games and picks."""
    return InMemoryStore


@pytest.fixture
def sql_store(test_settings: Settings) -> Generator[Any, None, None]:
    """Provide a SqlScoringStore over a fresh temporary SQLite database."""
    from pickem_engine.data import SqlScoringStore, init_db, reset_engine

    reset_engine()
    init_db()
    yield SqlScoringStore()
    reset_engine()


@pytest.fixture
def seed_db(sql_store: Any) -> Callable[..., None]:
    """Insert GameRecord and PickRecord values into the test database."""
    from pickem_engine.data import Game, Pick, session_scope

    def _seed(
        games: Iterable[GameRecord] = (), picks: Iterable[PickRecord] = ()
    ) -> None:
        with session_scope() as session:
            for g in games:
                session.add(
                    Game(
                        id=g.id,
                        week=g.week,
                        season=g.season,
                        season_type=g.season_type.value,
                        home_team=g.home_team,
                        away_team=g.away_team,
                        home_score=g.home_score,
                        away_score=g.away_score,
                        status=g.status.value,
                        game_time=g.game_time,
                    )
                )
            session.flush()
            for p in picks:
                session.add(
                    Pick(
                        id=p.id,
                        user_id=p.user_id,
                        game_id=p.game_id,
                        picked_team=p.picked_team,
                        is_lock=p.is_lock,
                        **p.fields.as_dict(),
                    )
                )

    return _seed


# =============================================================================
# Marker Helpers
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


@pytest.fixture(autouse=True)
def _reset_loguru() -> Generator[None, None, None]:
    """Drop loguru sinks added during a test (CLI runs add stream sinks)."""
    yield
    from loguru import logger

    logger.remove()
