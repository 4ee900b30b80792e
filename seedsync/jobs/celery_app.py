"""Celery configuration for scheduled seed checks."""

from __future__ import annotations

import os

from celery import Celery
from celery.schedules import crontab

from seedsync.utils.dates import timezone_name

broker_url = os.environ.get("REDIS_URL", "redis://redis:6379/0")
backend_url = os.environ.get("REDIS_URL", "redis://redis:6379/0")

celery_app = Celery("seedsync", broker=broker_url, backend=backend_url, include=["seedsync.jobs.seed"])
celery_app.conf.timezone = timezone_name()
celery_app.conf.beat_schedule = {
    "seed-check": {
        "task": "seedsync.jobs.seed.run_seed",
        "schedule": crontab(hour=int(os.environ.get("SEED_CHECK_HOUR", "6")), minute=int(os.environ.get("SEED_CHECK_MINUTE", "0"))),
    },
}


@celery_app.task(name="seedsync.jobs.seed.run_seed")
def run_seed_task(force: bool = False) -> str:  # pragma: no cover - executed by worker
    import asyncio

    from seedsync.jobs.seed import run_seed

    result = asyncio.run(run_seed(force=force))
    return result.state.value
