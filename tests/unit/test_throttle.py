"""Unit tests for failed-login throttling."""

from datetime import timedelta

import pytest

from app.core.exceptions import TooManyAttempts
from app.core.store import InMemoryKeyValueStore
from app.services.throttle import LoginThrottle

EMAIL = "user@example.com"
ORIGIN = "203.0.113.7"


@pytest.fixture
def throttle(clock):
    return LoginThrottle(
        InMemoryKeyValueStore(clock=clock),
        max_attempts=5,
        lockout=timedelta(minutes=15),
        clock=clock,
    )


async def fail(throttle: LoginThrottle, times: int, origin: str = ORIGIN) -> int:
    count = 0
    for _ in range(times):
        count = await throttle.record_failure(EMAIL, origin)
    return count


class TestLockout:
    async def test_four_failures_still_allowed(self, throttle):
        await fail(throttle, 4)

        assert await throttle.check(EMAIL, ORIGIN) is None

    async def test_fifth_failure_locks(self, throttle):
        assert await fail(throttle, 5) == 5

        remaining = await throttle.check(EMAIL, ORIGIN)
        assert remaining == pytest.approx(15 * 60)

    async def test_ensure_allowed_reports_minutes(self, throttle):
        await fail(throttle, 5)

        with pytest.raises(TooManyAttempts) as exc_info:
            await throttle.ensure_allowed(EMAIL, ORIGIN)

        assert exc_info.value.retry_after == 900
        assert "15 minutes" in exc_info.value.message

    async def test_minutes_round_up(self, throttle, clock):
        await fail(throttle, 5)
        clock.advance(minutes=10, seconds=30)

        with pytest.raises(TooManyAttempts) as exc_info:
            await throttle.ensure_allowed(EMAIL, ORIGIN)

        assert "5 minutes" in exc_info.value.message

    async def test_lock_lifts_after_window(self, throttle, clock):
        await fail(throttle, 5)
        clock.advance(minutes=15)

        assert await throttle.check(EMAIL, ORIGIN) is None
        # The stale record is gone, so counting restarts.
        assert await throttle.record_failure(EMAIL, ORIGIN) == 1

    async def test_window_slides_from_last_attempt(self, throttle, clock):
        await fail(throttle, 3)
        clock.advance(minutes=10)
        await fail(throttle, 2)
        clock.advance(minutes=10)

        # Twenty minutes after the first failure but ten after the last.
        assert await throttle.check(EMAIL, ORIGIN) is not None


class TestScope:
    async def test_origins_are_tracked_separately(self, throttle):
        await fail(throttle, 5)

        assert await throttle.check(EMAIL, "198.51.100.1") is None

    async def test_email_is_case_insensitive(self, throttle):
        await fail(throttle, 5)

        assert await throttle.check("USER@example.com", ORIGIN) is not None

    async def test_clear_resets_counter(self, throttle):
        await fail(throttle, 4)
        await throttle.clear(EMAIL, ORIGIN)

        assert await throttle.record_failure(EMAIL, ORIGIN) == 1
