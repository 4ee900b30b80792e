"""Retry helpers without external dependencies."""

from __future__ import annotations

import asyncio
import functools
import logging
import random
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

RETRY_EXCEPTIONS: tuple[type[BaseException], ...] = (OSError, asyncio.TimeoutError)

Sleep = Callable[[float], Awaitable[None]]


def retry_async(
    func: Callable[..., Awaitable],
    *,
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    jitter: tuple[float, float] = (0.0, 1.0),
    retry_on: tuple[type[BaseException], ...] = RETRY_EXCEPTIONS,
    sleep: Sleep | None = None,
):
    """Wrap ``func`` so retryable failures back off exponentially.

    The wait before attempt ``n + 1`` is ``initial_delay * 2 ** (n - 1)`` plus a
    uniform jitter drawn from ``jitter``. Anything outside ``retry_on`` and the
    last failure once ``max_attempts`` is reached propagate unchanged.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        delay = initial_delay
        attempt = 0
        while True:
            try:
                return await func(*args, **kwargs)
            except retry_on as exc:
                attempt += 1
                if attempt >= max_attempts:
                    raise
                wait = delay + random.uniform(*jitter)
                logger.warning(
                    "Attempt %s/%s failed (%s); retrying in %.2fs", attempt, max_attempts, exc, wait
                )
                await (sleep or asyncio.sleep)(wait)
                delay *= 2

    return wrapper
