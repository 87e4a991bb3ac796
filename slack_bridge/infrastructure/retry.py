"""Async retry with exponential backoff."""

import asyncio
import sys
from typing import Awaitable, Callable, List, Optional, TypeVar

T = TypeVar("T")


def _log(msg: str):
    print(msg, file=sys.stderr)


def backoff_delays(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 10.0,
    backoff_factor: float = 2.0,
) -> List[float]:
    """Seconds slept after each failed attempt except the last."""
    return [
        min(base_delay * backoff_factor ** (attempt - 1), max_delay)
        for attempt in range(1, max_attempts)
    ]


async def retry(
    fn: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 10.0,
    backoff_factor: float = 2.0,
    should_retry: Optional[Callable[[Exception], bool]] = None,
) -> T:
    """Await ``fn()`` until it succeeds, re-raising the last error when attempts run out."""
    delays = backoff_delays(max_attempts, base_delay, max_delay, backoff_factor)
    attempt = 1
    while True:
        try:
            return await fn()
        except Exception as e:
            if attempt >= max_attempts or (should_retry is not None and not should_retry(e)):
                raise
            delay = delays[attempt - 1]
            _log(f"Attempt {attempt} failed ({e}), retrying in {delay:.1f}s...")
            await asyncio.sleep(delay)
            attempt += 1
