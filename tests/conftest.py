import json
from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from seedsync.db.kv import KeyValueStore
from seedsync.db.markers import SeedMarkers
from seedsync.db.migrate import run_migrations
from seedsync.ingest import SeedLoader
from seedsync.store.base import SERVER_TIMESTAMP, Delete

STORE_NOW = datetime(2026, 1, 6, 12, 0, tzinfo=timezone.utc)


def brand(doc_id, name="Acme", active=True):
    return {"id": doc_id, "name": name, "imageURL": f"https://img.example.com/{doc_id}.png", "isActive": active}


def category(doc_id, name="Sofas", brand_ids=("b1",)):
    return {
        "id": doc_id,
        "name": name,
        "imageURL": f"https://img.example.com/{doc_id}.png",
        "brandIds": list(brand_ids),
        "isActive": True,
    }


def product(doc_id, name="Loft Sofa", price=899.0):
    return {
        "id": doc_id,
        "name": name,
        "description": f"{name} description",
        "nameLower": name.lower(),
        "categoryId": "c1",
        "brandId": "b1",
        "price": price,
        "imageURL": f"https://img.example.com/{doc_id}.png",
        "isActive": True,
        "keywords": name.lower().split(),
    }


def remote(record):
    """Document as the store would hold it after a previous import."""
    doc = {key: value for key, value in record.items() if key != "id"}
    doc["createdAt"] = STORE_NOW
    doc["updatedAt"] = STORE_NOW
    return doc


class FakeDocumentStore:
    def __init__(self, collections=None, *, configured=True):
        self.collections = {name: dict(docs) for name, docs in (collections or {}).items()}
        self.configured = configured
        self.calls = []
        self.commits = []
        self.commit_errors = []

    async def get_document(self, collection, doc_id):
        self.calls.append(("get", collection, doc_id))
        doc = self.collections.get(collection, {}).get(doc_id)
        return dict(doc) if doc is not None else None

    async def list_document_ids(self, collection):
        self.calls.append(("list", collection))
        return set(self.collections.get(collection, {}))

    async def commit(self, writes):
        self.calls.append(("commit", len(writes)))
        if self.commit_errors:
            raise self.commit_errors.pop(0)
        self.commits.append(list(writes))
        for write in writes:
            docs = self.collections.setdefault(write.ref.collection, {})
            if isinstance(write, Delete):
                docs.pop(write.ref.doc_id, None)
                continue
            data = {key: STORE_NOW if value is SERVER_TIMESTAMP else value for key, value in write.data.items()}
            if write.merge and write.ref.doc_id in docs:
                docs[write.ref.doc_id].update(data)
            else:
                docs[write.ref.doc_id] = data

    async def close(self):
        pass

    def reset_calls(self):
        self.calls.clear()

    def calls_for(self, collection):
        return [call for call in self.calls if call[0] != "commit" and call[1] == collection]


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    run_migrations(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def kv(engine):
    return KeyValueStore(engine)


@pytest.fixture()
def markers(kv):
    return SeedMarkers(kv)


@pytest.fixture()
def seed_files(tmp_path):
    """Writes seed files into a temporary directory and returns a loader for it."""

    def write(brands=(), categories=(), products=(), ext="json"):
        payloads = {"brands": list(brands), "categories": list(categories), "products": list(products)}
        for name, items in payloads.items():
            (tmp_path / f"{name}.{ext}").write_text(json.dumps(items, indent=2))
        return SeedLoader(tmp_path)

    return write
