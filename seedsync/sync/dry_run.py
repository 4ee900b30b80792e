"""Read-only diff of local seed sections against the remote store."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from seedsync.store.base import DocumentStore
from seedsync.sync.reports import DryRunReport, SectionResult
from seedsync.sync.sections import LocalSection
from seedsync.utils.tasks import gather_fail_fast

logger = logging.getLogger(__name__)


class DryRunBuilder:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def build_report(self, local_sections: Sequence[LocalSection[Any]]) -> DryRunReport:
        results = []
        for local in local_sections:
            results.append(await self.build_section(local))
        return DryRunReport(tuple(results))

    async def build_section(self, local: LocalSection[Any]) -> SectionResult:
        section = local.section
        local_ids = local.ids
        existing, remote_ids = await gather_fail_fast(
            self.fetch_existing(section.collection, local_ids),
            self.store.list_document_ids(section.collection),
        )
        deletions = remote_ids - local_ids

        create = update = skip = 0
        for record in local.records:
            current = existing.get(record.id)
            if current is None:
                create += 1
            elif section.same_content(record.to_fields(), current):
                skip += 1
            else:
                update += 1

        result = SectionResult(
            name=section.key,
            will_create=create,
            will_update=update,
            will_skip=skip,
            will_delete=len(deletions),
            total_json=len(local.records),
        )
        logger.info("Dry-run %s", result.summary_line())
        return result

    async def fetch_existing(self, collection: str, ids: Iterable[str]) -> dict[str, dict[str, Any]]:
        ids = list(ids)
        documents = await gather_fail_fast(*(self.store.get_document(collection, doc_id) for doc_id in ids))
        return {doc_id: doc for doc_id, doc in zip(ids, documents) if doc is not None}
