"""Tests for the SQLAlchemy-backed ScoringStore."""
from __future__ import annotations

from contextlib import contextmanager

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from pickem_engine.data.store import SqlScoringStore
from pickem_engine.types import (
    AwardCandidate,
    AwardType,
    GameNotFoundError,
    GameStatus,
    PickFields,
    PickNotFoundError,
    SeasonType,
    StoreError,
    StoreUnavailableError,
    WeekKey,
)

WEEK_3 = WeekKey(3, 2025, SeasonType.REGULAR)


@pytest.fixture
def seeded(sql_store, seed_db, make_game, make_pick, hours):
    """Two week-3 games, one week-4 game and one 2024 game."""
    seed_db(
        games=[
            make_game("g1", week=3, home_score=21, away_score=14, game_time=hours(3)),
            make_game("g2", week=3, home_team="BUF", away_team="MIA",
                      status=GameStatus.IN_PROGRESS, home_score=7, away_score=0,
                      game_time=hours(0)),
            make_game("g3", week=4, home_team="LV", away_team="LAC",
                      status=GameStatus.SCHEDULED, game_time=hours(170)),
            make_game("g4", week=3, season=2024, home_score=3, away_score=0),
        ],
        picks=[
            make_pick("p1", "u1", "g1", "KC", is_lock=True),
            make_pick("p2", "u2", "g1", "DEN"),
            make_pick("p3", "u1", "g2", "MIA"),
            make_pick("p4", "u1", "g3", "LV"),
            make_pick("p5", "u1", "g4", "KC"),
        ],
    )
    return sql_store


def _failing_scope(error: Exception):
    @contextmanager
    def scope():
        raise error
        yield  # pragma: no cover

    return scope


class TestGames:
    """Tests for game queries."""

    def test_get_game(self, seeded) -> None:
        game = seeded.get_game("g1")

        assert game.home_team == "KC"
        assert game.status == GameStatus.COMPLETED

    def test_get_missing_game(self, seeded) -> None:
        with pytest.raises(GameNotFoundError, match="Game not found: nope"):
            seeded.get_game("nope")

    def test_completed_games(self, seeded) -> None:
        assert [g.id for g in seeded.get_completed_games()] == ["g4", "g1"]
        assert [g.id for g in seeded.get_completed_games(season=2025)] == ["g1"]

    def test_week_keys(self, seeded) -> None:
        assert seeded.get_week_keys(2025) == [
            WeekKey(3, 2025, SeasonType.REGULAR),
            WeekKey(4, 2025, SeasonType.REGULAR),
        ]

    def test_week_games_ordered_by_kickoff(self, seeded) -> None:
        assert [g.id for g in seeded.get_week_games(WEEK_3)] == ["g2", "g1"]

    def test_season_games(self, seeded) -> None:
        assert {g.id for g in seeded.get_season_games(2025)} == {"g1", "g2", "g3"}


class TestPicks:
    """Tests for pick queries and updates."""

    def test_picks_for_game(self, seeded) -> None:
        assert [p.id for p in seeded.get_picks_for_game("g1")] == ["p1", "p2"]

    def test_week_and_season_picks(self, seeded) -> None:
        assert [p.id for p in seeded.get_week_picks(WEEK_3)] == ["p1", "p2", "p3"]
        assert [p.id for p in seeded.get_season_picks(2024)] == ["p5"]

    def test_update_pick_fields(self, seeded) -> None:
        fields = PickFields(
            solo_pick=True, solo_lock=True, super_bonus=True,
            bonus_points=5, pick_points=7,
        )

        seeded.update_pick_fields("p1", fields)

        [p1, _] = seeded.get_picks_for_game("g1")
        assert p1.fields == fields
        assert p1.picked_team == "KC"
        assert p1.is_lock is True

    def test_update_missing_pick(self, seeded) -> None:
        with pytest.raises(PickNotFoundError):
            seeded.update_pick_fields("nope", PickFields())


class TestAwards:
    """Tests for award storage."""

    def _award(self, user: str, award_type: AwardType, points: int) -> AwardCandidate:
        return AwardCandidate(
            user_id=user,
            week=3,
            season=2025,
            season_type=SeasonType.REGULAR,
            award_type=award_type,
            points=points,
            record="1-0",
        )

    def test_replace_week_awards(self, seeded) -> None:
        first = [
            self._award("u1", AwardType.TOP_SCORER, 4),
            self._award("u2", AwardType.LOWEST_SCORER, 0),
        ]
        second = [self._award("u2", AwardType.TOP_SCORER, 9)]

        assert seeded.has_week_awards(WEEK_3) is False
        assert seeded.replace_week_awards(WEEK_3, first) == 2
        assert seeded.replace_week_awards(WEEK_3, second) == 1

        assert seeded.get_week_awards(WEEK_3) == second
        assert seeded.has_week_awards(WEEK_3) is True
        assert seeded.has_week_awards(WeekKey(4, 2025)) is False

    def test_replace_is_atomic(self, seeded) -> None:
        """A failing insert keeps the previous awards."""
        original = [self._award("u1", AwardType.TOP_SCORER, 4)]
        seeded.replace_week_awards(WEEK_3, original)

        duplicate = self._award("u2", AwardType.TOP_SCORER, 9)
        with pytest.raises(StoreError):
            seeded.replace_week_awards(WEEK_3, [duplicate, duplicate])

        assert seeded.get_week_awards(WEEK_3) == original


class TestErrorTranslation:
    """SQLAlchemy failures surface as engine exceptions."""

    def test_operational_error_is_unavailable(self) -> None:
        error = OperationalError("SELECT 1", {}, Exception("database is locked"))
        store = SqlScoringStore(scope=_failing_scope(error))

        with pytest.raises(StoreUnavailableError):
            store.get_game("g1")

    def test_other_errors_are_store_errors(self) -> None:
        error = IntegrityError("INSERT", {}, Exception("constraint"))
        store = SqlScoringStore(scope=_failing_scope(error))

        with pytest.raises(StoreError) as exc_info:
            store.get_picks_for_game("g1")

        assert not isinstance(exc_info.value, StoreUnavailableError)
