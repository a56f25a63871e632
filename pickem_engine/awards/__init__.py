"""Weekly awards and season standings.

Submodules:
    tiebreaker: Ranking order shared by awards and standings
    aggregator: Pure weekly award computation
    processor: Store-backed weekly processing and season sweep
    standings: Season statistics and ranking
"""
from __future__ import annotations

from pickem_engine.awards.aggregator import (
    UserWeekStats,
    aggregate_user_stats,
    compute_weekly_awards,
    select_award_winners,
)
from pickem_engine.awards.processor import (
    AwardsRunResult,
    AwardsSweepResult,
    WeekCompletion,
    WeeklyAwardsProcessor,
)
from pickem_engine.awards.standings import (
    STANDINGS_COLUMNS,
    UserSeasonStats,
    compute_user_stats,
    rank_users,
    standings_frame,
)
from pickem_engine.awards.tiebreaker import tiebreaker_key, win_percentage

__all__ = [
    # Aggregation
    "UserWeekStats",
    "aggregate_user_stats",
    "compute_weekly_awards",
    "select_award_winners",
    # Processing
    "AwardsRunResult",
    "AwardsSweepResult",
    "WeekCompletion",
    "WeeklyAwardsProcessor",
    # Standings
    "STANDINGS_COLUMNS",
    "UserSeasonStats",
    "compute_user_stats",
    "rank_users",
    "standings_frame",
    # Tiebreaker
    "tiebreaker_key",
    "win_percentage",
]
