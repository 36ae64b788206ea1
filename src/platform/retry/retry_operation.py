"""
Retry with linear backoff.

Attempt ``n`` failing waits ``delay * n`` seconds before attempt ``n + 1``.
Only exceptions for which ``should_retry`` answers True are retried; the
last one is re-raised once attempts are exhausted.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

import anyio

from src.platform.logging.loguru_io import Logger

T = TypeVar('T')


async def retry_operation(
    operation: Callable[[], Awaitable[T]],
    *,
    max_retries: int = 3,
    delay: float = 1.0,
    should_retry: Callable[[Exception], bool] = lambda e: True,
) -> T:
    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as e:
            if attempt >= max_retries or not should_retry(e):
                raise
            wait = delay * attempt
            Logger.base.debug(
                f'🔁 [RETRY] Attempt {attempt}/{max_retries} failed ({e}), retrying in {wait:.1f}s'
            )
            await anyio.sleep(wait)
            attempt += 1
