"""Backend-neutral compiled predicates and sort directives."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class PredicateKind(str, enum.Enum):
    EQUALS = "eq"
    NOT_EQUALS = "ne"
    EXISTS = "exists"
    ABSENT = "absent"
    GREATER_EQUAL = "gte"
    LESS_EQUAL = "lte"
    IN = "in"
    PATTERN = "pattern"


class SortDirection(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, raw: Any) -> SortDirection | None:
        """Case-insensitive lookup; ``None`` for anything else."""
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class WildcardPattern:
    """A string match with optional wildcards at either end.

    ``leading`` and ``trailing`` both set means "contains", only
    ``trailing`` means "starts with", only ``leading`` means "ends with".
    """

    text: str
    leading: bool = False
    trailing: bool = False

    def to_like(self, escape: str = "\\") -> str:
        escaped = (
            self.text.replace(escape, escape * 2)
            .replace("%", escape + "%")
            .replace("_", escape + "_")
        )
        return f"{'%' if self.leading else ''}{escaped}{'%' if self.trailing else ''}"


@dataclass(frozen=True)
class Predicate:
    kind: PredicateKind
    field: str
    value: Any = None

    def __repr__(self) -> str:
        if self.kind in (PredicateKind.EXISTS, PredicateKind.ABSENT):
            return f"<{self.field} {self.kind.value}>"
        return f"<{self.field} {self.kind.value} {self.value!r}>"


@dataclass(frozen=True)
class SortDirective:
    field: str
    direction: SortDirection = SortDirection.ASC
    seed: str | None = None

    @property
    def is_random(self) -> bool:
        return self.seed is not None
