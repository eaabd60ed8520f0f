"""
Retry with exponential back-off for outbound calls.

Delays double after every failed attempt: with the defaults (3 retries,
1 s initial delay) a call is attempted 4 times, sleeping 1 s, 2 s, 4 s
in between. `sleep` is injectable so tests can record delays instead of
waiting for them.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    retries: int = 3,
    initial_delay: float = 1.0,
    is_retryable: Optional[Callable[[Exception], bool]] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Await `operation()` until it succeeds or `retries` retries are spent."""
    attempt = 0
    delay = initial_delay

    while True:
        try:
            return await operation()
        except Exception as e:
            if attempt >= retries:
                logger.error(f"[RETRY] Giving up after {attempt + 1} attempts: {e}")
                raise
            if is_retryable is not None and not is_retryable(e):
                logger.warning(f"[RETRY] Permanent failure, not retrying: {e}")
                raise

            attempt += 1
            logger.info(
                f"[RETRY] Retrying operation after {delay * 1000:.0f}ms. "
                f"Retries left: {retries - attempt + 1}"
            )
            await sleep(delay)
            delay *= 2
