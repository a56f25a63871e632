"""Solo pick and solo lock detection.

A pick is a *solo pick* when no other user picked the same team in that game,
and a *solo lock* when it is a lock and no other user locked that team.
Statuses only mean something once a game has kicked off, since picks can
still change while a game is scheduled.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

from pickem_engine.types import PickId, PickRecord, TeamId


@dataclass(frozen=True)
class SoloStatus:
    """Solo flags of a single pick.

    Attributes:
        is_solo_pick: Exactly one pick in the game selected this team.
        is_solo_lock: This pick is a lock and the only lock on this team.
    """

    is_solo_pick: bool = False
    is_solo_lock: bool = False


def compute_solo_status(
    pick: PickRecord, all_picks: Iterable[PickRecord]
) -> SoloStatus:
    """Compute solo flags for one pick against every pick on the same game.

    Args:
        pick: The pick to evaluate.
        all_picks: All picks on the game, including ``pick`` itself.

    Returns:
        SoloStatus for ``pick``.
    """
    team_picks = [p for p in all_picks if p.picked_team == pick.picked_team]
    team_locks = [p for p in team_picks if p.is_lock]
    return SoloStatus(
        is_solo_pick=len(team_picks) == 1,
        is_solo_lock=pick.is_lock and len(team_locks) == 1,
    )


def compute_game_solo_statuses(
    picks: Iterable[PickRecord],
) -> dict[PickId, SoloStatus]:
    """Compute solo flags for every pick on one game in a single pass.

    Args:
        picks: All picks on the game.

    Returns:
        Mapping of pick id to its SoloStatus.
    """
    picks = list(picks)
    picks_by_team: dict[TeamId, int] = defaultdict(int)
    locks_by_team: dict[TeamId, int] = defaultdict(int)

    for pick in picks:
        picks_by_team[pick.picked_team] += 1
        if pick.is_lock:
            locks_by_team[pick.picked_team] += 1

    return {
        pick.id: SoloStatus(
            is_solo_pick=picks_by_team[pick.picked_team] == 1,
            is_solo_lock=pick.is_lock and locks_by_team[pick.picked_team] == 1,
        )
        for pick in picks
    }
