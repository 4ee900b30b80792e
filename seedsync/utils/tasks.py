"""Helpers for running coroutines side by side."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import Any


async def gather_fail_fast(*aws: Awaitable[Any]) -> list[Any]:
    """Like ``asyncio.gather`` but cancels the remaining tasks on the first failure.

    The first exception propagates unchanged.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
