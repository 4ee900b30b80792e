"""Loading of bundled seed files."""

from __future__ import annotations

import json
import logging
import pathlib
from collections import Counter
from typing import Any, TypeVar

import yaml

from seedsync.errors import DecodeFailure, DuplicateSeedId, ResourceNotFound

logger = logging.getLogger(__name__)

SEEDS_DIR = pathlib.Path(__file__).with_name("seeds")

T = TypeVar("T")


class SeedLoader:
    """Reads ``<name>.<ext>`` files from a seeds directory."""

    def __init__(self, base_dir: pathlib.Path | str = SEEDS_DIR) -> None:
        self.base_dir = pathlib.Path(base_dir)

    def load_bytes(self, name: str, ext: str) -> bytes:
        path = self.base_dir / f"{name}.{ext}"
        if not path.is_file():
            raise ResourceNotFound(path.name)
        return path.read_bytes()

    def load_records(self, record_type: type[T], name: str, ext: str) -> list[T]:
        return self.decode_records(record_type, self.load_bytes(name, ext), f"{name}.{ext}")

    def decode_records(self, record_type: type[T], raw: bytes, resource: str) -> list[T]:
        """Decode already-read bytes; the format follows ``resource``'s extension."""
        ext = resource.rsplit(".", 1)[-1]
        try:
            items = _decode(raw, ext)
            if not isinstance(items, list):
                raise TypeError(f"expected a list of records, got {type(items).__name__}")
            records = [record_type.from_dict(item) for item in items]  # type: ignore[attr-defined]
        except (ValueError, KeyError, TypeError, yaml.YAMLError) as exc:
            raise DecodeFailure(resource, exc) from exc
        duplicates = [key for key, count in Counter(r.id for r in records).items() if count > 1]  # type: ignore[attr-defined]
        if duplicates:
            raise DuplicateSeedId(resource, duplicates)
        logger.debug("Loaded %s records from %s", len(records), resource)
        return records


def _decode(raw: bytes, ext: str) -> Any:
    if ext == "json":
        return json.loads(raw)
    if ext in {"yml", "yaml"}:
        return yaml.safe_load(raw)
    raise ValueError(f"unsupported seed format: {ext}")
