import pytest
from fastapi.testclient import TestClient

from conftest import FakeDocumentStore, brand, category
from seedsync.api.main import app, get_runner
from seedsync.config import SeedConfig
from seedsync.db.markers import SeedMarkers
from seedsync.jobs.seed import SeedRunner
from seedsync.sync.importer import SeedImportService


@pytest.fixture()
def store():
    return FakeDocumentStore()


@pytest.fixture()
def client(kv, seed_files, store):
    loader = seed_files(brands=[brand("b1"), brand("b2")], categories=[category("c1")])

    async def override():
        service = SeedImportService(store, kv, loader=loader)
        yield SeedRunner(service, SeedMarkers(kv), config=SeedConfig(seeds_dir=loader.base_dir))

    app.dependency_overrides[get_runner] = override
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_status_defaults(client):
    response = client.get("/seed/status")
    assert response.status_code == 200
    assert response.json() == {
        "did_seed": False,
        "has_run_before": False,
        "seed_version": 0,
        "required_seed_version": 1,
        "enabled": True,
        "overwrite": False,
    }


def test_settings_update_and_clamp(client):
    response = client.put("/seed/settings", json={"overwrite": True, "required_version": 0})
    body = response.json()
    assert body["overwrite"] is True
    assert body["required_seed_version"] == 1
    assert body["enabled"] is True

    body = client.put("/seed/settings", json={"enabled": False}).json()
    assert body["enabled"] is False
    assert body["overwrite"] is True


def test_version_bump(client):
    assert client.post("/seed/version/bump").json()["required_seed_version"] == 2
    assert client.post("/seed/version/bump", params={"delta": 3}).json()["required_seed_version"] == 5


def test_dry_run_reports_without_writing(client, store):
    response = client.post("/seed/dry-run")
    assert response.status_code == 200
    body = response.json()
    brands = next(section for section in body["sections"] if section["name"] == "brands")
    assert brands["will_create"] == 2
    assert body["summary"].startswith("Dry-run:")
    assert store.commits == []


def test_run_then_skip(client, store):
    first = client.post("/seed/run").json()
    assert first["state"] == "done"
    assert first["error"] is None
    assert any("Brands: upserted 2, deleted 0" in line for line in first["log"])
    assert set(store.collections["brands"]) == {"b1", "b2"}

    status = client.get("/seed/status").json()
    assert status["did_seed"] is True
    assert status["has_run_before"] is True
    assert status["seed_version"] == 1

    second = client.post("/seed/run").json()
    assert second["state"] == "skipped"
    assert "already completed" in second["log"][-1]

    forced = client.post("/seed/run", params={"force": True}).json()
    assert forced["state"] == "nothing_to_do"


def test_run_failure_is_reported(client, store):
    store.commit_errors = [ValueError("rejected")]
    body = client.post("/seed/run").json()
    assert body["state"] == "errored"
    assert body["error"] == "rejected"
    assert client.get("/seed/status").json()["did_seed"] is False


def test_reset(client):
    client.post("/seed/run")
    body = client.post("/seed/reset").json()
    assert body["did_seed"] is False
    assert body["seed_version"] == 1


def test_status_has_run_before_follows_enabled_flag(client):
    client.post("/seed/run")
    assert client.get("/seed/status").json()["has_run_before"] is True
    body = client.put("/seed/settings", json={"enabled": False}).json()
    assert body["did_seed"] is True
    assert body["has_run_before"] is False
