"""FastAPI control surface for the seed importer."""

from __future__ import annotations

import logging
from typing import AsyncIterator

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from seedsync.db.markers import SeedMarkers
from seedsync.errors import SeedSyncError
from seedsync.jobs.seed import SeedRunner, build_runner
from seedsync.sync.reports import DryRunReport

logger = logging.getLogger(__name__)

app = FastAPI(title="Seed Sync API")


class SeedStatus(BaseModel):
    did_seed: bool
    has_run_before: bool
    seed_version: int
    required_seed_version: int
    enabled: bool
    overwrite: bool


class SeedSettings(BaseModel):
    enabled: bool | None = None
    overwrite: bool | None = None
    required_version: int | None = None


class SectionPayload(BaseModel):
    name: str
    will_create: int
    will_update: int
    will_skip: int
    will_delete: int
    total_json: int


class DryRunResponse(BaseModel):
    sections: list[SectionPayload]
    summary: str


class RunResponse(BaseModel):
    state: str
    log: list[str] = Field(default_factory=list)
    error: str | None = None


async def get_runner() -> AsyncIterator[SeedRunner]:
    runner = build_runner()
    try:
        yield runner
    finally:
        await runner.service.store.close()


def _status(markers: SeedMarkers) -> SeedStatus:
    snapshot = markers.snapshot()
    return SeedStatus(
        did_seed=snapshot.did_seed,
        has_run_before=markers.has_run_before,
        seed_version=snapshot.seed_version,
        required_seed_version=snapshot.required_seed_version,
        enabled=snapshot.enabled,
        overwrite=snapshot.overwrite_enabled,
    )


def _report_payload(report: DryRunReport) -> DryRunResponse:
    return DryRunResponse(
        sections=[
            SectionPayload(
                name=section.name,
                will_create=section.will_create,
                will_update=section.will_update,
                will_skip=section.will_skip,
                will_delete=section.will_delete,
                total_json=section.total_json,
            )
            for section in report.sections
        ],
        summary=report.summary,
    )


@app.get("/seed/status", response_model=SeedStatus)
async def seed_status(runner: SeedRunner = Depends(get_runner)) -> SeedStatus:
    return _status(runner.markers)


@app.put("/seed/settings", response_model=SeedStatus)
async def update_settings(payload: SeedSettings, runner: SeedRunner = Depends(get_runner)) -> SeedStatus:
    markers = runner.markers
    if payload.enabled is not None:
        markers.enabled = payload.enabled
        logger.info("Seed import enabled = %s", payload.enabled)
    if payload.overwrite is not None:
        markers.overwrite_enabled = payload.overwrite
        logger.info("Seed overwrite = %s", payload.overwrite)
    if payload.required_version is not None:
        markers.required_seed_version = payload.required_version
        logger.info("Required seed version = %s", markers.required_seed_version)
    return _status(markers)


@app.post("/seed/version/bump", response_model=SeedStatus)
async def bump_version(delta: int = Query(1), runner: SeedRunner = Depends(get_runner)) -> SeedStatus:
    markers = runner.markers
    markers.required_seed_version = markers.required_seed_version + delta
    return _status(markers)


@app.post("/seed/run", response_model=RunResponse)
async def run_seed(force: bool = Query(False), runner: SeedRunner = Depends(get_runner)) -> RunResponse:
    lines: list[str] = []
    runner.sink = lines.append
    result = await runner.run_if_needed(force=force)
    return RunResponse(
        state=result.state.value,
        log=lines,
        error=str(result.error) if result.error else None,
    )


@app.post("/seed/dry-run", response_model=DryRunResponse)
async def dry_run(runner: SeedRunner = Depends(get_runner)) -> DryRunResponse:
    try:
        report = await runner.dry_run()
    except SeedSyncError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return _report_payload(report)


@app.post("/seed/reset", response_model=SeedStatus)
async def reset_markers(runner: SeedRunner = Depends(get_runner)) -> SeedStatus:
    runner.reset_markers()
    return _status(runner.markers)
