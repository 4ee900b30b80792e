"""Per-namespace record of the last applied seed digests."""

from __future__ import annotations

from seedsync.db.kv import KeyValueStore


class ChecksumStore:
    def __init__(self, kv: KeyValueStore, namespace: str) -> None:
        self.kv = kv
        self.namespace = namespace

    def _key(self, name: str) -> str:
        return f"checksum.{self.namespace}.{name}"

    def get(self, name: str) -> str | None:
        return self.kv.get(self._key(name))

    def set(self, name: str, digest: str | None) -> None:
        self.kv.set(self._key(name), digest)
