"""Pick point rules.

Base points depend on correctness and the lock flag:

    ============  ======  ========
                  lock    no lock
    ============  ======  ========
    correct       +2      +1
    incorrect     -2       0
    ============  ======  ========

From ``BONUS_START_WEEK`` onwards a correct pick can also earn a bonus:
a lock that is also the only pick on its team earns the super bonus (5),
otherwise a solo lock or a solo pick earns 2. Incorrect picks never earn a
bonus. Tied or unresolved games bypass these rules entirely and score zero.

Example:
    >>> score = score_pick(True, True, week=5, solo=SoloStatus(True, True))
    >>> score.total_points
    7
"""

from __future__ import annotations

from dataclasses import dataclass

from pickem_engine.scoring.solo import SoloStatus

# =============================================================================
# Constants
# =============================================================================

BONUS_START_WEEK: int = 3

CORRECT_POINTS: int = 1
CORRECT_LOCK_POINTS: int = 2
INCORRECT_POINTS: int = 0
INCORRECT_LOCK_POINTS: int = -2

SUPER_BONUS_POINTS: int = 5
SOLO_LOCK_BONUS_POINTS: int = 2
SOLO_PICK_BONUS_POINTS: int = 2

# Every total a single pick can produce
POSSIBLE_TOTALS: frozenset[int] = frozenset({-2, 0, 1, 2, 3, 4, 6, 7})


@dataclass(frozen=True)
class PickScore:
    """Points earned by one pick.

    Attributes:
        base_points: Points from correctness and lock flag.
        bonus_points: Solo bonus points (never negative).
        total_points: base_points + bonus_points.
    """

    base_points: int
    bonus_points: int
    total_points: int

    def breakdown(
        self, *, week: int, is_lock: bool, is_correct: bool, solo: SoloStatus
    ) -> str:
        """Human-readable explanation of the score for debug logs."""
        return (
            f"base={self.base_points}, bonus={self.bonus_points}, week={week}, "
            f"is_lock={is_lock}, is_correct={is_correct}, "
            f"solo_pick={solo.is_solo_pick}, solo_lock={solo.is_solo_lock}"
        )


def base_points(is_correct: bool, is_lock: bool) -> int:
    """Points before any bonus."""
    if is_correct:
        return CORRECT_LOCK_POINTS if is_lock else CORRECT_POINTS
    return INCORRECT_LOCK_POINTS if is_lock else INCORRECT_POINTS


def bonus_points(is_correct: bool, is_lock: bool, week: int, solo: SoloStatus) -> int:
    """Solo bonus for a pick, zero for incorrect picks and early weeks."""
    if not is_correct or week < BONUS_START_WEEK:
        return 0
    # A lock with a unique team is necessarily the unique lock on that team
    if is_lock and solo.is_solo_pick:
        return SUPER_BONUS_POINTS
    if solo.is_solo_lock:
        return SOLO_LOCK_BONUS_POINTS
    if solo.is_solo_pick:
        return SOLO_PICK_BONUS_POINTS
    return 0


def score_pick(is_correct: bool, is_lock: bool, week: int, solo: SoloStatus) -> PickScore:
    """Score a pick on a game that has a winner.

    Args:
        is_correct: Whether the pick matches the winning team.
        is_lock: Whether the pick is locked.
        week: Week number of the game.
        solo: Solo flags of the pick.

    Returns:
        PickScore with base, bonus and total points.
    """
    base = base_points(is_correct, is_lock)
    bonus = bonus_points(is_correct, is_lock, week, solo)
    return PickScore(base_points=base, bonus_points=bonus, total_points=base + bonus)
