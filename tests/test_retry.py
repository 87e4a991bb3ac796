"""Tests for infrastructure/retry.py."""

import pytest
from unittest.mock import AsyncMock, patch

from slack_bridge.infrastructure.retry import backoff_delays, retry


class TestBackoffDelays:
    def test_default_schedule(self):
        assert backoff_delays() == [1.0, 2.0]

    def test_capped(self):
        assert backoff_delays(max_attempts=6, base_delay=1.0, max_delay=5.0) == [1.0, 2.0, 4.0, 5.0, 5.0]

    def test_single_attempt(self):
        assert backoff_delays(max_attempts=1) == []


class TestRetry:
    @pytest.mark.asyncio
    async def test_first_try(self):
        fn = AsyncMock(return_value="ok")
        assert await retry(fn) == "ok"
        assert fn.await_count == 1

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self):
        fn = AsyncMock(side_effect=[RuntimeError("a"), RuntimeError("b"), "ok"])
        with patch("slack_bridge.infrastructure.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            assert await retry(fn) == "ok"
        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_reraises_last_error(self):
        fn = AsyncMock(side_effect=[RuntimeError("a"), RuntimeError("b")])
        with patch("slack_bridge.infrastructure.retry.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(RuntimeError, match="b"):
                await retry(fn, max_attempts=2)

    @pytest.mark.asyncio
    async def test_should_retry_false_stops(self):
        fn = AsyncMock(side_effect=ValueError("bad input"))
        with patch("slack_bridge.infrastructure.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            with pytest.raises(ValueError):
                await retry(fn, should_retry=lambda e: not isinstance(e, ValueError))
        assert fn.await_count == 1
        sleep.assert_not_awaited()
