"""Remote document store contract."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, Sequence


class _ServerTimestamp:
    """Sentinel asking the store to fill in its own commit time."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True, slots=True)
class DocumentRef:
    collection: str
    doc_id: str


@dataclass(frozen=True, slots=True)
class Upsert:
    ref: DocumentRef
    data: Mapping[str, Any] = field(default_factory=dict)
    merge: bool = False


@dataclass(frozen=True, slots=True)
class Delete:
    ref: DocumentRef


Write = Upsert | Delete


class DocumentStore(Protocol):
    @property
    def configured(self) -> bool: ...

    async def get_document(self, collection: str, doc_id: str) -> dict[str, Any] | None: ...

    async def list_document_ids(self, collection: str) -> set[str]: ...

    async def commit(self, writes: Sequence[Write]) -> None: ...
