"""Dry-run reports and import outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True, slots=True)
class SectionResult:
    name: str
    will_create: int
    will_update: int
    will_skip: int
    will_delete: int
    total_json: int

    @property
    def has_changes(self) -> bool:
        return (self.will_create + self.will_update + self.will_delete) > 0

    def summary_line(self) -> str:
        return (
            f"{self.name}: create {self.will_create}, update {self.will_update}, "
            f"skip {self.will_skip}, delete {self.will_delete} (json {self.total_json})"
        )


@dataclass(frozen=True, slots=True)
class DryRunReport:
    sections: tuple[SectionResult, ...]

    def section(self, name: str) -> SectionResult:
        for result in self.sections:
            if result.name == name:
                return result
        raise KeyError(name)

    @property
    def is_empty(self) -> bool:
        """True when no section would create, update or delete anything."""
        return not any(result.has_changes for result in self.sections)

    @property
    def summary(self) -> str:
        lines = ["Dry-run:"]
        lines.extend(f"  {result.summary_line()}" for result in self.sections)
        return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class SectionWriteResult:
    upserted: int = 0
    deleted: int = 0

    @property
    def did_write(self) -> bool:
        return self.upserted > 0 or self.deleted > 0


@dataclass(frozen=True, slots=True)
class ImportOutcome:
    results: tuple[tuple[str, SectionWriteResult], ...] = ()

    @classmethod
    def empty(cls, names: Iterable[str]) -> ImportOutcome:
        return cls(tuple((name, SectionWriteResult()) for name in names))

    def section(self, name: str) -> SectionWriteResult:
        return dict(self.results).get(name, SectionWriteResult())

    def upserted(self, name: str) -> int:
        return self.section(name).upserted

    def deleted(self, name: str) -> int:
        return self.section(name).deleted

    @property
    def total_writes(self) -> int:
        return sum(result.upserted + result.deleted for _, result in self.results)
