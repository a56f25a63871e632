"""Season standings.

Builds per-user season statistics from persisted pick points and ranks them
with the same tiebreaker as the weekly awards. Streaks follow the order the
games were played, so picks are processed by ``game_time`` (games without a
time sort last, then by id).

A tied game voids the pick: it scores zero, counts as a loss and resets the
streak.

Example:
    >>> stats = compute_user_stats(store.get_season_picks(2025),
    ...                            store.get_season_games(2025))
    >>> df = standings_frame(rank_users(stats))
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import pandas as pd

from pickem_engine.awards.tiebreaker import tiebreaker_key, win_percentage
from pickem_engine.scoring.outcome import resolve_winner
from pickem_engine.types import GameId, GameRecord, PickRecord, UserId

STANDINGS_COLUMNS = [
    "rank",
    "user_id",
    "points",
    "wins",
    "losses",
    "total",
    "win_pct",
    "current_streak",
    "max_streak",
]


@dataclass
class UserSeasonStats:
    """Season totals for one user."""

    user_id: UserId
    points: int = 0
    wins: int = 0
    total: int = 0
    current_streak: int = 0
    max_streak: int = 0

    @property
    def losses(self) -> int:
        return self.total - self.wins

    @property
    def win_pct(self) -> float:
        return win_percentage(self.wins, self.total)

    def record_pick(self, points: int, correct: bool) -> None:
        self.total += 1
        self.points += points
        if correct:
            self.wins += 1
            self.current_streak += 1
            self.max_streak = max(self.max_streak, self.current_streak)
        else:
            self.current_streak = 0


def _chronological(game: GameRecord) -> tuple[bool, float, str]:
    # Timestamps compare across naive and aware kickoff times
    kickoff = game.game_time.timestamp() if game.game_time is not None else 0.0
    return (game.game_time is None, kickoff, game.id)


def compute_user_stats(
    picks: Iterable[PickRecord], games: Iterable[GameRecord]
) -> dict[UserId, UserSeasonStats]:
    """Aggregate season stats per user over completed games.

    Args:
        picks: Picks with persisted pick_points.
        games: Games the picks refer to; unfinished games are ignored.

    Returns:
        Mapping of user id to UserSeasonStats.
    """
    final: dict[GameId, GameRecord] = {g.id: g for g in games if g.has_final_score}
    ordered = sorted(
        (p for p in picks if p.game_id in final),
        key=lambda p: (*_chronological(final[p.game_id]), p.id),
    )

    stats: dict[UserId, UserSeasonStats] = {}
    for pick in ordered:
        user = stats.setdefault(pick.user_id, UserSeasonStats(user_id=pick.user_id))
        winner = resolve_winner(final[pick.game_id])
        user.record_pick(pick.pick_points, pick.picked_team == winner)
    return stats


def rank_users(stats: dict[UserId, UserSeasonStats]) -> list[UserSeasonStats]:
    """Order users by points, win %, wins, then fewest losses."""
    return sorted(
        stats.values(),
        key=lambda s: tiebreaker_key(s.user_id, s.points, s.wins, s.total),
    )


def standings_frame(ranked: list[UserSeasonStats]) -> pd.DataFrame:
    """Render ranked standings as a DataFrame, one row per user.

    Args:
        ranked: Output of rank_users.

    Returns:
        DataFrame with STANDINGS_COLUMNS; ``win_pct`` is rounded to 3 places.
    """
    rows = [
        {
            "rank": position,
            "user_id": s.user_id,
            "points": s.points,
            "wins": s.wins,
            "losses": s.losses,
            "total": s.total,
            "win_pct": round(s.win_pct, 3),
            "current_streak": s.current_streak,
            "max_streak": s.max_streak,
        }
        for position, s in enumerate(ranked, start=1)
    ]
    return pd.DataFrame(rows, columns=STANDINGS_COLUMNS)
