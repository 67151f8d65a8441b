from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

R = TypeVar("R")

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

logger = logging.getLogger(__name__)


def is_retryable(exc: httpx.RequestError | httpx.HTTPStatusError) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status in RETRYABLE_STATUS_CODES or status >= 500
    return isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout, httpx.ReadError, httpx.ReadTimeout))


async def call_with_retries(
    operation: Callable[[], Awaitable[R]],
    *,
    retries: int = 3,
    delay: float = 0.5,
) -> R:
    """Await ``operation`` with linear backoff (attempt x delay) for transient failures.

    The final error is re-raised once ``retries`` extra attempts are spent.
    """
    attempt = 0
    while True:
        try:
            return await operation()
        except (httpx.RequestError, httpx.HTTPStatusError) as exc:
            attempt += 1
            if attempt > retries or not is_retryable(exc):
                raise
            logger.info("Transient provider failure (attempt %s/%s): %s", attempt, retries, exc)
            await asyncio.sleep(delay * attempt)
