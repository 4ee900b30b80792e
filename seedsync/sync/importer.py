"""Checksum-gated import of seed sections into the remote store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from seedsync.db.checksums import ChecksumStore
from seedsync.db.kv import KeyValueStore
from seedsync.errors import StoreNotConfigured
from seedsync.ingest import SeedLoader
from seedsync.store.base import SERVER_TIMESTAMP, DocumentRef, DocumentStore, Upsert
from seedsync.sync.batch import BatchExecutor
from seedsync.sync.dry_run import DryRunBuilder
from seedsync.sync.reports import DryRunReport, ImportOutcome, SectionResult, SectionWriteResult
from seedsync.sync.sections import BRANDS, CATEGORIES, PRODUCTS, SECTIONS, LocalSection, Section
from seedsync.utils.hashing import sha256_hex
from seedsync.utils.tasks import gather_fail_fast

logger = logging.getLogger(__name__)

CHUNK_SIZE = 300
DEFAULT_NAMESPACE = "seed.v1"


@dataclass(frozen=True, slots=True)
class SeedSources:
    """Resource names of the three seed files and their shared extension."""

    brands: str = BRANDS.key
    categories: str = CATEGORIES.key
    products: str = PRODUCTS.key
    ext: str = "json"

    def name_for(self, section: Section[Any]) -> str:
        return getattr(self, section.key)


class SeedImportService:
    def __init__(
        self,
        store: DocumentStore,
        kv: KeyValueStore,
        *,
        loader: SeedLoader | None = None,
        dry_run_builder: DryRunBuilder | None = None,
        batch_executor: BatchExecutor | None = None,
        hasher: Callable[[bytes], str] = sha256_hex,
        sections: Sequence[Section[Any]] = SECTIONS,
    ) -> None:
        self.store = store
        self.kv = kv
        self.loader = loader or SeedLoader()
        self.dry_run_builder = dry_run_builder or DryRunBuilder(store)
        self.batch_executor = batch_executor or BatchExecutor(store)
        self.hasher = hasher
        self.sections = tuple(sections)

    async def import_smart(
        self,
        *,
        overwrite: bool = True,
        sources: SeedSources | None = None,
        checksum_namespace: str = DEFAULT_NAMESPACE,
        dry_run: bool = False,
        prune_missing: bool = False,
    ) -> tuple[DryRunReport, ImportOutcome]:
        if not self.store.configured:
            raise StoreNotConfigured()

        local_sections = self.prepare_inputs(sources or SeedSources())
        checksums = ChecksumStore(self.kv, checksum_namespace)
        report = await self.dry_run_builder.build_report(local_sections)

        if dry_run:
            return report, ImportOutcome.empty(section.key for section in self.sections)

        results = []
        for local in local_sections:
            result = await self.run_section(
                local,
                report.section(local.section.key),
                checksums,
                overwrite=overwrite,
                prune_missing=prune_missing,
            )
            results.append((local.section.key, result))
        return report, ImportOutcome(tuple(results))

    def prepare_inputs(self, sources: SeedSources) -> list[LocalSection[Any]]:
        prepared = []
        for section in self.sections:
            name = sources.name_for(section)
            raw = self.loader.load_bytes(name, sources.ext)
            records = self.loader.decode_records(section.record_type, raw, f"{name}.{sources.ext}")
            digest = self.hasher(raw)
            prepared.append(LocalSection(section, records, digest))
        return prepared

    async def run_section(
        self,
        local: LocalSection[Any],
        planned: SectionResult,
        checksums: ChecksumStore,
        *,
        overwrite: bool,
        prune_missing: bool,
    ) -> SectionWriteResult:
        key = local.section.key
        changed = checksums.get(key) != local.digest
        if not should_sync(changed, planned, prune_missing):
            logger.info("Section %s unchanged; skipping", key)
            return SectionWriteResult()

        result = await self.process_section(local, overwrite=overwrite, prune_missing=prune_missing)
        if result.did_write:
            checksums.set(key, local.digest)
        logger.info("Section %s: upserted %s, deleted %s", key, result.upserted, result.deleted)
        return result

    async def process_section(
        self, local: LocalSection[Any], *, overwrite: bool, prune_missing: bool
    ) -> SectionWriteResult:
        collection = local.section.collection
        deleted = upserted = 0
        if prune_missing:
            refs = await self.deletions_for(collection, local.ids)
            if refs:
                await self.batch_executor.commit_deletes(refs)
                deleted = len(refs)
        if local.records:
            upserted = await self.upsert_with_timestamps(collection, local, overwrite=overwrite)
        return SectionWriteResult(upserted=upserted, deleted=deleted)

    async def deletions_for(self, collection: str, local_ids: set[str]) -> list[DocumentRef]:
        existing = await self.store.list_document_ids(collection)
        return [DocumentRef(collection, doc_id) for doc_id in sorted(existing - local_ids)]

    async def upsert_with_timestamps(
        self, collection: str, local: LocalSection[Any], *, overwrite: bool
    ) -> int:
        total = 0
        records = list(local.records)
        for start in range(0, len(records), CHUNK_SIZE):
            chunk = records[start : start + CHUNK_SIZE]
            documents = await gather_fail_fast(
                *(self.store.get_document(collection, record.id) for record in chunk)
            )
            operations = []
            for record, current in zip(chunk, documents):
                is_new = current is None
                if not is_new and not overwrite:
                    continue
                data = record.to_fields()
                data["updatedAt"] = SERVER_TIMESTAMP
                if is_new:
                    data["createdAt"] = SERVER_TIMESTAMP
                operations.append(Upsert(DocumentRef(collection, record.id), data, merge=not is_new))
            if not operations:
                continue
            await self.batch_executor.commit_upserts(operations)
            total += len(operations)
        return total


def should_sync(changed_by_checksum: bool, planned: SectionResult, prune_missing: bool) -> bool:
    return (
        changed_by_checksum
        or planned.will_create > 0
        or planned.will_update > 0
        or (prune_missing and planned.will_delete > 0)
    )
