"""Tests for the bounded retry helper."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from pickem_engine.jobs.retry import RetryExhaustedError, call_with_retry
from pickem_engine.types import GameNotFoundError, StoreUnavailableError


class TestCallWithRetry:
    """Tests for call_with_retry()."""

    def test_first_attempt_success(self) -> None:
        """A successful call should not sleep."""
        sleep = MagicMock()

        result = call_with_retry(lambda: 42, attempts=3, delay=1.0, sleep=sleep)

        assert result.value == 42
        assert result.attempts == 1
        sleep.assert_not_called()

    def test_recovers_after_transient_failures(self) -> None:
        """Transient errors are retried with the fixed delay between calls."""
        fn = MagicMock(
            side_effect=[StoreUnavailableError("busy"), TimeoutError("slow"), "ok"]
        )
        sleep = MagicMock()

        result = call_with_retry(fn, attempts=3, delay=1.0, sleep=sleep)

        assert result.value == "ok"
        assert result.attempts == 3
        assert fn.call_count == 3
        assert sleep.call_count == 2
        sleep.assert_called_with(1.0)

    def test_exhaustion_raises_with_last_error(self) -> None:
        """After the last attempt the final error is carried in the exception."""
        errors = [ConnectionError("a"), ConnectionError("b"), ConnectionError("c")]
        fn = MagicMock(side_effect=errors)
        sleep = MagicMock()

        with pytest.raises(RetryExhaustedError) as exc_info:
            call_with_retry(fn, attempts=3, delay=0.5, sleep=sleep, description="fetch")

        assert exc_info.value.attempts == 3
        assert exc_info.value.last_error is errors[-1]
        assert "fetch failed after 3 attempt(s)" in str(exc_info.value)
        # No sleep after the final attempt
        assert sleep.call_count == 2

    def test_non_transient_error_is_not_retried(self) -> None:
        """Errors outside retry_on propagate immediately."""
        fn = MagicMock(side_effect=GameNotFoundError("g1"))
        sleep = MagicMock()

        with pytest.raises(GameNotFoundError):
            call_with_retry(fn, attempts=3, sleep=sleep)

        assert fn.call_count == 1
        sleep.assert_not_called()

    def test_single_attempt(self) -> None:
        fn = MagicMock(side_effect=StoreUnavailableError("down"))

        with pytest.raises(RetryExhaustedError):
            call_with_retry(fn, attempts=1, sleep=MagicMock())

        assert fn.call_count == 1

    def test_rejects_zero_attempts(self) -> None:
        with pytest.raises(ValueError, match="attempts must be >= 1"):
            call_with_retry(lambda: None, attempts=0)
