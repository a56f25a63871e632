"""Bounded retry for transient store failures.

The loop makes at most ``attempts`` calls, waiting a fixed ``delay`` between
them through an injectable ``sleep`` so tests can run without real waits.
Only exceptions listed in ``retry_on`` are retried; anything else (such as a
missing game) propagates on the first occurrence.

Example:
    >>> result = call_with_retry(lambda: store.get_game(game_id), attempts=3)
    >>> game = result.value
"""
from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from pickem_engine.logging import get_logger
from pickem_engine.types import PickemEngineError, StoreError

logger = get_logger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS: tuple[type[Exception], ...] = (
    StoreError,
    TimeoutError,
    ConnectionError,
)


class RetryExhaustedError(PickemEngineError):
    """All attempts failed with transient errors."""

    def __init__(self, description: str, attempts: int, last_error: Exception) -> None:
        self.description = description
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"{description} failed after {attempts} attempt(s): {last_error}"
        )


@dataclass(frozen=True)
class RetryResult(Generic[T]):
    """Value returned by a successful call and the attempts it took."""

    value: T
    attempts: int


def call_with_retry(
    fn: Callable[[], T],
    *,
    attempts: int = 3,
    delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
    retry_on: tuple[type[Exception], ...] = TRANSIENT_ERRORS,
    description: str = "call",
) -> RetryResult[T]:
    """Call ``fn`` until it succeeds or ``attempts`` calls have failed.

    Args:
        fn: Zero-argument callable to execute.
        attempts: Total number of calls allowed (>= 1).
        delay: Seconds to wait between failed calls.
        sleep: Function used to wait; replaced in tests.
        retry_on: Exception types considered transient.
        description: Label used in log messages and errors.

    Returns:
        RetryResult holding the value and the number of attempts used.

    Raises:
        RetryExhaustedError: If every attempt raised a transient error.
        ValueError: If attempts is less than 1.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be >= 1, got {attempts}")

    last_error: Exception | None = None
    for attempt in range(1, attempts + 1):
        try:
            value = fn()
        except retry_on as e:
            last_error = e
            if attempt < attempts:
                logger.warning(
                    f"{description} failed (attempt {attempt}/{attempts}): {e}. "
                    f"Retrying in {delay:g}s..."
                )
                sleep(delay)
            else:
                logger.warning(
                    f"{description} failed (attempt {attempt}/{attempts}): {e}. "
                    "No retries remaining."
                )
            continue
        return RetryResult(value=value, attempts=attempt)

    assert last_error is not None
    raise RetryExhaustedError(description, attempts, last_error) from last_error
