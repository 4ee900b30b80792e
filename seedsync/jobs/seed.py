"""Run-once seed orchestration."""

from __future__ import annotations

import asyncio
import enum
import logging
import sys
import time
from dataclasses import dataclass
from typing import Callable

from dotenv import load_dotenv
from sqlalchemy.engine import Engine

from seedsync.config import SeedConfig, load_config
from seedsync.db.kv import KeyValueStore
from seedsync.db.markers import SeedMarkers
from seedsync.db.migrate import run_migrations
from seedsync.db.session import create_engine_from_env
from seedsync.ingest import SeedLoader
from seedsync.store.firestore import FirestoreClient
from seedsync.sync.importer import SeedImportService
from seedsync.sync.reports import DryRunReport, ImportOutcome
from seedsync.utils.dates import iso_timestamp

logger = logging.getLogger(__name__)

LogSink = Callable[[str], None]


class RunState(str, enum.Enum):
    IDLE = "idle"
    GATING = "gating"
    SKIPPED = "skipped"
    DRY_RUNNING = "dry_running"
    NOTHING_TO_DO = "nothing_to_do"
    IMPORTING = "importing"
    DONE = "done"
    ERRORED = "errored"


@dataclass(slots=True)
class RunResult:
    state: RunState
    report: DryRunReport | None = None
    outcome: ImportOutcome | None = None
    error: Exception | None = None


class SeedRunner:
    """Decides whether a seed run is due and drives dry-run, import and markers.

    Failures never escape ``run_if_needed``: they are written to the log stream
    and leave the markers untouched so the next invocation starts over.
    """

    def __init__(
        self,
        service: SeedImportService,
        markers: SeedMarkers,
        *,
        config: SeedConfig | None = None,
        sink: LogSink | None = None,
    ) -> None:
        self.service = service
        self.markers = markers
        self.config = config or SeedConfig()
        self.sink = sink
        self.state = RunState.IDLE

    async def run_if_needed(
        self,
        *,
        overwrite: bool | None = None,
        checksum_namespace: str | None = None,
        prune_missing: bool | None = None,
        force: bool = False,
    ) -> RunResult:
        self.state = RunState.GATING
        if not self.can_run(force=force):
            return self._finish(RunResult(RunState.SKIPPED))

        if overwrite is None:
            overwrite = self.markers.overwrite_enabled
        namespace = checksum_namespace or self.config.checksum_namespace
        prune = self.config.prune_missing if prune_missing is None else prune_missing
        started = time.perf_counter()

        try:
            self.state = RunState.DRY_RUNNING
            report = await self.dry_run(checksum_namespace=namespace, prune_missing=prune)
            if report.is_empty:
                self.markers.mark_seeded()
                self.log("[Seed] No changes; remote writes skipped")
                return self._finish(RunResult(RunState.NOTHING_TO_DO, report=report))

            self.state = RunState.IMPORTING
            _, outcome = await self.service.import_smart(
                overwrite=overwrite,
                sources=self.config.sources,
                checksum_namespace=namespace,
                dry_run=False,
                prune_missing=prune,
            )
            self.markers.mark_seeded()
        except Exception as exc:
            self.log(f"[Seed] Import failed: {exc}")
            return self._finish(RunResult(RunState.ERRORED, error=exc))

        self.log(f"[Seed] Import finished in {time.perf_counter() - started:.2f}s")
        for section in self.service.sections:
            result = outcome.section(section.key)
            self.log(f"- {section.key.capitalize()}: upserted {result.upserted}, deleted {result.deleted}")
        return self._finish(RunResult(RunState.DONE, report=report, outcome=outcome))

    async def dry_run(self, *, checksum_namespace: str | None = None, prune_missing: bool | None = None) -> DryRunReport:
        report, _ = await self.service.import_smart(
            overwrite=self.markers.overwrite_enabled,
            sources=self.config.sources,
            checksum_namespace=checksum_namespace or self.config.checksum_namespace,
            dry_run=True,
            prune_missing=self.config.prune_missing if prune_missing is None else prune_missing,
        )
        self.log("[Seed] Dry-run report:")
        lines = report.summary.splitlines()
        if lines and lines[0].strip().startswith("Dry-run:"):
            lines = lines[1:]
        for line in (line.strip() for line in lines):
            if line:
                self.log(line)
        return report

    def can_run(self, *, force: bool = False) -> bool:
        if not self.service.store.configured:
            self.log("[Seed] Remote store is not configured; import skipped")
            return False
        if not self.markers.enabled:
            self.log("[Seed] Import disabled; skipped")
            return False
        current = self.markers.seed_version
        needs_reseed = current != self.markers.required_seed_version
        if not (force or not self.markers.did_seed or needs_reseed):
            self.log(f"[Seed] Import already completed (version {current}); skipped")
            return False
        return True

    def reset_markers(self) -> None:
        self.markers.reset_seed_markers()
        self.log("[Seed] Import markers reset")

    def log(self, message: str) -> None:
        line = f"[{iso_timestamp()}] {message}"
        if self.sink is None:
            logger.info("%s", line)
            return
        try:
            self.sink(line)
        except Exception:
            logger.exception("Seed log sink failed")

    def _finish(self, result: RunResult) -> RunResult:
        self.state = result.state
        return result


def build_runner(
    engine: Engine | None = None,
    store: FirestoreClient | None = None,
    *,
    config: SeedConfig | None = None,
    sink: LogSink | None = None,
) -> SeedRunner:
    config = config or load_config()
    engine = engine or create_engine_from_env()
    run_migrations(engine)
    kv = KeyValueStore(engine)
    service = SeedImportService(
        store or FirestoreClient.from_env(),
        kv,
        loader=SeedLoader(config.seeds_dir),
    )
    return SeedRunner(service, SeedMarkers(kv), config=config, sink=sink)


async def run_seed(force: bool = False) -> RunResult:
    load_dotenv()
    runner = build_runner()
    try:
        return await runner.run_if_needed(force=force)
    finally:
        await runner.service.store.close()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    result = asyncio.run(run_seed())
    if result.state is RunState.ERRORED:
        sys.exit(1)


if __name__ == "__main__":
    main()
