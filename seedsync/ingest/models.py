"""Seed record models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol


class SeedRecord(Protocol):
    @property
    def id(self) -> str: ...

    def to_fields(self) -> dict[str, Any]: ...


def _str_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise TypeError(f"expected a list of strings, got {type(value).__name__}")
    return tuple(str(item) for item in value)


def _bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected a boolean, got {type(value).__name__}")
    return value


@dataclass(frozen=True, slots=True)
class Brand:
    id: str
    name: str
    image_url: str
    is_active: bool

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Brand:
        return cls(
            id=str(data["id"]),
            name=data["name"],
            image_url=data["imageURL"],
            is_active=_bool(data["isActive"]),
        )

    def to_fields(self) -> dict[str, Any]:
        return {"name": self.name, "imageURL": self.image_url, "isActive": self.is_active}


@dataclass(frozen=True, slots=True)
class Category:
    id: str
    name: str
    image_url: str
    brand_ids: tuple[str, ...]
    is_active: bool

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Category:
        return cls(
            id=str(data["id"]),
            name=data["name"],
            image_url=data["imageURL"],
            brand_ids=_str_list(data["brandIds"]),
            is_active=_bool(data["isActive"]),
        )

    def to_fields(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "imageURL": self.image_url,
            "brandIds": list(self.brand_ids),
            "isActive": self.is_active,
        }


@dataclass(frozen=True, slots=True)
class Product:
    id: str
    name: str
    description: str
    name_lower: str
    category_id: str
    brand_id: str
    price: float
    image_url: str
    is_active: bool
    keywords: tuple[str, ...]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Product:
        return cls(
            id=str(data["id"]),
            name=data["name"],
            description=data["description"],
            name_lower=data["nameLower"],
            category_id=data["categoryId"],
            brand_id=data["brandId"],
            price=float(data["price"]),
            image_url=data["imageURL"],
            is_active=_bool(data["isActive"]),
            keywords=_str_list(data["keywords"]),
        )

    def to_fields(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "nameLower": self.name_lower,
            "categoryId": self.category_id,
            "brandId": self.brand_id,
            "price": self.price,
            "imageURL": self.image_url,
            "isActive": self.is_active,
            "keywords": list(self.keywords),
        }
