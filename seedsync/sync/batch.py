"""Atomic batch commits with bounded retry."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

import httpx

from seedsync.errors import TransientRemoteFailure
from seedsync.store.base import Delete, DocumentRef, DocumentStore, Upsert
from seedsync.utils.retry import RETRY_EXCEPTIONS, Sleep, retry_async

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (TransientRemoteFailure, httpx.TransportError, *RETRY_EXCEPTIONS)

MAX_ATTEMPTS = 5
INITIAL_DELAY = 0.25
JITTER = (0.0, 0.25)


class BatchExecutor:
    def __init__(self, store: DocumentStore, *, sleep: Sleep | None = None) -> None:
        self.store = store
        self._sleep = sleep or asyncio.sleep

    async def commit_upserts(
        self,
        operations: Sequence[Upsert],
        *,
        max_attempts: int = MAX_ATTEMPTS,
        initial_delay: float = INITIAL_DELAY,
        jitter: tuple[float, float] = JITTER,
    ) -> None:
        await self._commit(list(operations), max_attempts, initial_delay, jitter)

    async def commit_deletes(
        self,
        refs: Sequence[DocumentRef],
        *,
        max_attempts: int = MAX_ATTEMPTS,
        initial_delay: float = INITIAL_DELAY,
        jitter: tuple[float, float] = JITTER,
    ) -> None:
        await self._commit([Delete(ref) for ref in refs], max_attempts, initial_delay, jitter)

    async def _commit(self, writes, max_attempts: int, initial_delay: float, jitter: tuple[float, float]) -> None:
        if not writes:
            return
        commit = retry_async(
            self.store.commit,
            max_attempts=max_attempts,
            initial_delay=initial_delay,
            jitter=jitter,
            retry_on=RETRYABLE_ERRORS,
            sleep=self._sleep,
        )
        await commit(writes)
        logger.debug("Batch of %s writes committed", len(writes))
