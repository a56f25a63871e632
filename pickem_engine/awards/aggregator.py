"""Weekly awards aggregation.

Turns one week's picks and games into award candidates. Only picks on games
that are completed with both scores count. Per user the aggregator sums
points, correct picks and total picks, then hands out:

- top_scorer: every user with the highest points
- lowest_scorer: every user with the lowest points
- perfect_week: every user who got all their picks right
- cold_week: every user who got none right

Ties for top or lowest score award every tied user. A user may win several
awards in the same week.

Example:
    >>> awards = compute_weekly_awards(5, 2025, SeasonType.REGULAR, picks, games)
    >>> [(a.user_id, a.award_type.value) for a in awards]
"""
from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

from pickem_engine.awards.tiebreaker import tiebreaker_key, win_percentage
from pickem_engine.logging import get_logger
from pickem_engine.scoring.engine import compute_game_fields
from pickem_engine.scoring.outcome import resolve_winner
from pickem_engine.types import (
    AwardCandidate,
    AwardType,
    GameId,
    GameRecord,
    PickId,
    PickRecord,
    SeasonType,
    UserId,
    WeekKey,
)

logger = get_logger(__name__)

AWARD_ORDER: tuple[AwardType, ...] = tuple(AwardType)


@dataclass
class UserWeekStats:
    """One user's results for a week."""

    points: int = 0
    correct: int = 0
    total: int = 0

    @property
    def losses(self) -> int:
        return self.total - self.correct

    @property
    def win_pct(self) -> float:
        return win_percentage(self.correct, self.total)

    @property
    def record(self) -> str:
        """Weekly record as "W-L"."""
        return f"{self.correct}-{self.losses}"


def _scorable_games(
    key: WeekKey, games: Iterable[GameRecord]
) -> dict[GameId, GameRecord]:
    return {
        g.id: g
        for g in games
        if g.week_key == key and g.has_final_score
    }


def _preview_points(
    games: dict[GameId, GameRecord], picks: list[PickRecord]
) -> dict[PickId, int]:
    """Recompute pick points from game state, ignoring persisted values."""
    by_game: dict[GameId, list[PickRecord]] = defaultdict(list)
    for pick in picks:
        by_game[pick.game_id].append(pick)

    points: dict[PickId, int] = {}
    for game_id, game_picks in by_game.items():
        for pick_id, fields in compute_game_fields(games[game_id], game_picks).items():
            points[pick_id] = fields.pick_points
    return points


def aggregate_user_stats(
    key: WeekKey,
    picks: Iterable[PickRecord],
    games: Iterable[GameRecord],
    *,
    preview: bool = False,
) -> dict[UserId, UserWeekStats]:
    """Accumulate points, correct and total picks per user for one week.

    Args:
        key: Week to aggregate.
        picks: Picks to consider; picks on other weeks are ignored.
        games: Games the picks refer to.
        preview: Recompute points instead of reading persisted pick_points.

    Returns:
        Mapping of user id to stats, containing only users with picks on
        scorable games.
    """
    scorable = _scorable_games(key, games)
    qualifying = [p for p in picks if p.game_id in scorable]
    preview_points = _preview_points(scorable, qualifying) if preview else {}

    stats: dict[UserId, UserWeekStats] = defaultdict(UserWeekStats)
    for pick in qualifying:
        user = stats[pick.user_id]
        user.total += 1
        if pick.picked_team == resolve_winner(scorable[pick.game_id]):
            user.correct += 1
        user.points += preview_points.get(pick.id, pick.pick_points)

    return dict(stats)


def select_award_winners(
    stats: dict[UserId, UserWeekStats],
) -> dict[AwardType, list[UserId]]:
    """Apply the award rules to aggregated stats.

    Returns:
        Winners per award type, each list in ranking order.
    """
    ranked = sorted(
        (u for u, s in stats.items() if s.total > 0),
        key=lambda u: tiebreaker_key(
            u, stats[u].points, stats[u].correct, stats[u].total
        ),
    )
    winners: dict[AwardType, list[UserId]] = {t: [] for t in AWARD_ORDER}
    if not ranked:
        return winners

    max_points = max(stats[u].points for u in ranked)
    min_points = min(stats[u].points for u in ranked)

    winners[AwardType.TOP_SCORER] = [u for u in ranked if stats[u].points == max_points]
    winners[AwardType.LOWEST_SCORER] = [
        u for u in ranked if stats[u].points == min_points
    ]
    winners[AwardType.PERFECT_WEEK] = [
        u for u in ranked if stats[u].correct == stats[u].total
    ]
    winners[AwardType.COLD_WEEK] = [u for u in ranked if stats[u].correct == 0]
    return winners


def compute_weekly_awards(
    week: int,
    season: int,
    season_type: SeasonType,
    picks: Iterable[PickRecord],
    games: Iterable[GameRecord],
    *,
    preview: bool = False,
) -> list[AwardCandidate]:
    """Compute the award candidates for one week.

    Args:
        week: Week number.
        season: Season year.
        season_type: Season type.
        picks: Picks of the week (extra picks are ignored).
        games: Games of the week (extra games are ignored).
        preview: Recompute points from game state rather than trusting
            persisted pick_points.

    Returns:
        Award candidates ordered by award type, then by ranking.
    """
    key = WeekKey(week, season, SeasonType(season_type))
    stats = aggregate_user_stats(key, picks, games, preview=preview)

    if not stats:
        logger.info(f"{key}: no picks on completed games, no awards")
        return []

    awards = [
        AwardCandidate(
            user_id=user_id,
            week=key.week,
            season=key.season,
            season_type=key.season_type,
            award_type=award_type,
            points=stats[user_id].points,
            record=stats[user_id].record,
        )
        for award_type, user_ids in select_award_winners(stats).items()
        for user_id in user_ids
    ]

    logger.debug(
        f"{key}: {len(awards)} award(s) across {len(stats)} user(s)"
        + (" (preview)" if preview else "")
    )
    return awards
