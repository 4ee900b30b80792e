"""String key-value storage on top of SQLAlchemy."""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.engine import Engine

from seedsync.utils.dates import iso_timestamp


class KeyValueStore:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def get(self, key: str) -> str | None:
        with self.engine.connect() as conn:
            return conn.execute(
                text("SELECT value FROM kv_entries WHERE key = :key"), {"key": key}
            ).scalar_one_or_none()

    def set(self, key: str, value: str | None) -> None:
        """Store ``value`` under ``key``; ``None`` removes the entry."""
        with self.engine.begin() as conn:
            if value is None:
                conn.execute(text("DELETE FROM kv_entries WHERE key = :key"), {"key": key})
                return
            params = {"key": key, "value": value, "updated_at": iso_timestamp()}
            existing = conn.execute(
                text("SELECT 1 FROM kv_entries WHERE key = :key"), {"key": key}
            ).scalar_one_or_none()
            if existing:
                conn.execute(
                    text("UPDATE kv_entries SET value = :value, updated_at = :updated_at WHERE key = :key"),
                    params,
                )
            else:
                conn.execute(
                    text("INSERT INTO kv_entries (key, value, updated_at) VALUES (:key, :value, :updated_at)"),
                    params,
                )
