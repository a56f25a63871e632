"""Tests for season standings."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pandas as pd

from pickem_engine.awards.standings import (
    STANDINGS_COLUMNS,
    UserSeasonStats,
    compute_user_stats,
    rank_users,
    standings_frame,
)
from pickem_engine.types import GameStatus


class TestUserSeasonStats:
    """Tests for UserSeasonStats.record_pick()."""

    def test_streaks(self) -> None:
        stats = UserSeasonStats(user_id="u1")
        for correct in [True, True, True, False, True]:
            stats.record_pick(1 if correct else 0, correct)

        assert stats.wins == 4
        assert stats.losses == 1
        assert stats.current_streak == 1
        assert stats.max_streak == 3
        assert stats.win_pct == 0.8


class TestComputeUserStats:
    """Tests for compute_user_stats()."""

    def test_orders_by_game_time(self, make_game, make_pick, kickoff) -> None:
        """Streaks follow kickoff order, not input order."""
        games = [
            make_game("late", home_score=0, away_score=7,
                      game_time=kickoff + timedelta(days=7)),
            make_game("early", home_score=7, away_score=0, game_time=kickoff),
        ]
        picks = [
            make_pick("p1", "u1", "late", "KC", pick_points=0),
            make_pick("p2", "u1", "early", "KC", pick_points=1),
        ]

        stats = compute_user_stats(picks, games)["u1"]

        assert stats.current_streak == 0
        assert stats.max_streak == 1
        assert stats.points == 1

    def test_aware_and_missing_kickoff_times(self, make_game, make_pick) -> None:
        """Timezone-aware kickoffs sort alongside games with no kickoff time."""
        games = [
            make_game("tbd", home_score=0, away_score=7, game_time=None),
            make_game("sun", home_score=7, away_score=0,
                      game_time=datetime(2025, 9, 7, 17, 0, tzinfo=timezone.utc)),
            make_game("thu", home_score=7, away_score=0,
                      game_time=datetime(2025, 9, 4, 20, 15, tzinfo=timezone.utc)),
        ]
        picks = [
            make_pick("p1", "u1", "tbd", "KC", pick_points=0),
            make_pick("p2", "u1", "sun", "KC", pick_points=1),
            make_pick("p3", "u1", "thu", "KC", pick_points=1),
        ]

        stats = compute_user_stats(picks, games)["u1"]

        # thu, sun, then the unscheduled game last
        assert stats.max_streak == 2
        assert stats.current_streak == 0

    def test_skips_unfinished_games(self, make_game, make_pick) -> None:
        games = [
            make_game("g1", home_score=7, away_score=0),
            make_game("g2", status=GameStatus.IN_PROGRESS, home_score=7, away_score=0),
        ]
        picks = [
            make_pick("p1", "u1", "g1", "KC", pick_points=1),
            make_pick("p2", "u1", "g2", "KC", pick_points=1),
        ]

        assert compute_user_stats(picks, games)["u1"].total == 1

    def test_tie_counts_as_loss(self, make_game, make_pick) -> None:
        games = [make_game("g1", home_score=3, away_score=3)]
        picks = [make_pick("p1", "u1", "g1", "KC", pick_points=0)]

        stats = compute_user_stats(picks, games)["u1"]

        assert stats.losses == 1
        assert stats.points == 0


class TestRankUsers:
    """Tests for rank_users()."""

    def test_tiebreaker_chain(self) -> None:
        """Points, then win %, then wins, then fewest losses."""
        stats = {
            "low": UserSeasonStats("low", points=1, wins=1, total=1),
            "pct": UserSeasonStats("pct", points=5, wins=4, total=4),
            "wins": UserSeasonStats("wins", points=5, wins=6, total=8),
            "top": UserSeasonStats("top", points=9, wins=5, total=9),
            "fewer": UserSeasonStats("fewer", points=5, wins=3, total=4),
        }

        ranked = [s.user_id for s in rank_users(stats)]

        assert ranked == ["top", "pct", "wins", "fewer", "low"]

    def test_fewer_losses_break_equal_rate(self) -> None:
        stats = {
            "a": UserSeasonStats("a", points=4, wins=0, total=3),
            "b": UserSeasonStats("b", points=4, wins=0, total=1),
        }

        assert [s.user_id for s in rank_users(stats)] == ["b", "a"]


class TestStandingsFrame:
    """Tests for standings_frame()."""

    def test_columns_and_rank(self) -> None:
        ranked = [
            UserSeasonStats("a", points=10, wins=2, total=3, current_streak=1,
                            max_streak=2),
            UserSeasonStats("b", points=3, wins=1, total=3),
        ]

        df = standings_frame(ranked)

        assert list(df.columns) == STANDINGS_COLUMNS
        assert df["rank"].tolist() == [1, 2]
        assert df["user_id"].tolist() == ["a", "b"]
        assert df.loc[0, "losses"] == 1
        assert df.loc[0, "win_pct"] == 0.667

    def test_empty(self) -> None:
        df = standings_frame([])

        assert isinstance(df, pd.DataFrame)
        assert df.empty
        assert list(df.columns) == STANDINGS_COLUMNS
