"""Seed sections: one record type bound to one remote collection."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Generic, Mapping, Sequence, TypeVar

from seedsync.ingest.models import Brand, Category, Product, SeedRecord

R = TypeVar("R", bound=SeedRecord)


@dataclass(frozen=True, slots=True)
class Section(Generic[R]):
    key: str
    collection: str
    record_type: type[R]
    compare_keys: tuple[str, ...]

    def same_content(self, local: Mapping[str, Any], remote: Mapping[str, Any]) -> bool:
        return canonical_json(pick(local, self.compare_keys)) == canonical_json(
            pick(remote, self.compare_keys)
        )


@dataclass(frozen=True, slots=True)
class LocalSection(Generic[R]):
    """A section's records as loaded for this run, with the source digest."""

    section: Section[R]
    records: Sequence[R]
    digest: str

    @property
    def ids(self) -> set[str]:
        return {record.id for record in self.records}


def pick(data: Mapping[str, Any], keys: Sequence[str]) -> dict[str, Any]:
    return {key: data[key] for key in keys if key in data}


def normalize(value: Any) -> Any:
    """Integral floats compare equal to ints, so 899.0 and 899 serialize alike."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, Mapping):
        return {key: normalize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize(item) for item in value]
    return value


def canonical_json(data: Mapping[str, Any]) -> str:
    return json.dumps(normalize(data), sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)


BRANDS = Section("brands", "brands", Brand, ("name", "imageURL", "isActive"))
CATEGORIES = Section("categories", "categories", Category, ("name", "imageURL", "brandIds", "isActive"))
PRODUCTS = Section(
    "products",
    "products",
    Product,
    (
        "name",
        "description",
        "nameLower",
        "categoryId",
        "brandId",
        "price",
        "imageURL",
        "isActive",
        "keywords",
    ),
)

SECTIONS: tuple[Section[Any], ...] = (BRANDS, CATEGORIES, PRODUCTS)
