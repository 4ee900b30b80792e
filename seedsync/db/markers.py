"""Durable run markers for the seed orchestrator."""

from __future__ import annotations

from dataclasses import dataclass

from seedsync.db.kv import KeyValueStore

PREFIX = "seed."


@dataclass(frozen=True, slots=True)
class MarkerSnapshot:
    did_seed: bool
    seed_version: int
    required_seed_version: int
    enabled: bool
    overwrite_enabled: bool


class SeedMarkers:
    """Typed view over the marker keys; unset keys read as their defaults."""

    def __init__(self, kv: KeyValueStore) -> None:
        self.kv = kv

    def _get_bool(self, name: str, default: bool) -> bool:
        value = self.kv.get(PREFIX + name)
        return default if value is None else value == "1"

    def _set_bool(self, name: str, value: bool) -> None:
        self.kv.set(PREFIX + name, "1" if value else "0")

    def _get_int(self, name: str, default: int) -> int:
        value = self.kv.get(PREFIX + name)
        return default if value is None else int(value)

    def _set_int(self, name: str, value: int) -> None:
        self.kv.set(PREFIX + name, str(value))

    @property
    def did_seed(self) -> bool:
        return self._get_bool("didSeed", False)

    @did_seed.setter
    def did_seed(self, value: bool) -> None:
        self._set_bool("didSeed", value)

    @property
    def did_run_once(self) -> bool:
        return self.did_seed

    @property
    def has_run_before(self) -> bool:
        return self.did_run_once and self.enabled

    @property
    def seed_version(self) -> int:
        return self._get_int("version", 0)

    @seed_version.setter
    def seed_version(self, value: int) -> None:
        self._set_int("version", value)

    @property
    def required_seed_version(self) -> int:
        return self._get_int("requiredVersion", 1)

    @required_seed_version.setter
    def required_seed_version(self, value: int) -> None:
        self._set_int("requiredVersion", max(1, value))

    @property
    def enabled(self) -> bool:
        return self._get_bool("enabled", True)

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._set_bool("enabled", value)

    @property
    def overwrite_enabled(self) -> bool:
        return self._get_bool("overwrite", False)

    @overwrite_enabled.setter
    def overwrite_enabled(self, value: bool) -> None:
        self._set_bool("overwrite", value)

    def mark_seeded(self) -> None:
        self.did_seed = True
        self.seed_version = self.required_seed_version

    def reset_seed_markers(self) -> None:
        self.did_seed = False

    def snapshot(self) -> MarkerSnapshot:
        return MarkerSnapshot(
            did_seed=self.did_seed,
            seed_version=self.seed_version,
            required_seed_version=self.required_seed_version,
            enabled=self.enabled,
            overwrite_enabled=self.overwrite_enabled,
        )
