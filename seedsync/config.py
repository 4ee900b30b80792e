"""Environment-driven settings."""

from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, field

from seedsync.ingest import SEEDS_DIR
from seedsync.sync.importer import DEFAULT_NAMESPACE, SeedSources


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class SeedConfig:
    seeds_dir: pathlib.Path = SEEDS_DIR
    sources: SeedSources = field(default_factory=SeedSources)
    checksum_namespace: str = DEFAULT_NAMESPACE
    prune_missing: bool = True


def load_config() -> SeedConfig:
    return SeedConfig(
        seeds_dir=pathlib.Path(os.environ.get("SEEDS_DIR", str(SEEDS_DIR))),
        sources=SeedSources(
            brands=os.environ.get("SEED_BRANDS_FILE", "brands"),
            categories=os.environ.get("SEED_CATEGORIES_FILE", "categories"),
            products=os.environ.get("SEED_PRODUCTS_FILE", "products"),
            ext=os.environ.get("SEED_FILE_EXTENSION", "json"),
        ),
        checksum_namespace=os.environ.get("SEED_CHECKSUM_NAMESPACE", DEFAULT_NAMESPACE),
        prune_missing=_env_flag("SEED_PRUNE_MISSING", True),
    )
