"""FieldRegistry — per-entity field kinds and validators."""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from .predicates import SortDirective

Validator = Callable[[Any], bool]

BOOLEAN_PREFIX = "is_"
DATETIME_SUFFIX = "_on"
DELETED_MARKER = "deleted_on"


class FieldKind(str, enum.Enum):
    STRING = "string"
    BOOLEAN = "boolean"
    DATETIME = "datetime"


def infer_field_kind(name: str) -> FieldKind:
    """Return the kind implied by a field name.

    ``is_*`` names are booleans, ``*_on`` names are timestamps, anything
    else is a string. The prefix rule wins, so ``is_logo_on`` is a boolean.
    """
    if name.startswith(BOOLEAN_PREFIX):
        return FieldKind.BOOLEAN
    if name.endswith(DATETIME_SUFFIX):
        return FieldKind.DATETIME
    return FieldKind.STRING


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    kind: FieldKind
    validator: Validator | None = None

    @classmethod
    def infer(cls, name: str, validator: Validator | None = None) -> FieldDescriptor:
        return cls(name=name, kind=infer_field_kind(name), validator=validator)


class FieldRegistry:
    """Ordered, read-only mapping of field name to :class:`FieldDescriptor`.

    Built once per entity type and shared by every request. Iteration
    follows declaration order, which is also the order in which filter
    predicates are compiled.

    The soft-delete marker (``deleted_marker``) and any ``hidden_fields``
    are dropped: they can be declared but never filtered or sorted on.
    """

    def __init__(
        self,
        fields: Mapping[str, Validator | None],
        *,
        id_field: str = "id",
        default_order: tuple[SortDirective, ...] = (),
        hidden_fields: frozenset[str] = frozenset(),
        deleted_marker: str | None = DELETED_MARKER,
    ) -> None:
        hidden = hidden_fields | {deleted_marker} if deleted_marker else hidden_fields
        self._fields: dict[str, FieldDescriptor] = {
            name: FieldDescriptor.infer(name, validator)
            for name, validator in fields.items()
            if name not in hidden
        }
        self._id_field = id_field
        self._default_order = tuple(default_order)

    @property
    def id_field(self) -> str:
        return self._id_field

    @property
    def default_order(self) -> tuple[SortDirective, ...]:
        return self._default_order

    def has(self, name: str) -> bool:
        return name in self._fields

    def get(self, name: str) -> FieldDescriptor | None:
        return self._fields.get(name)

    def kind_of(self, name: str) -> FieldKind:
        descriptor = self._fields.get(name)
        return descriptor.kind if descriptor else infer_field_kind(name)

    def validator_of(self, name: str) -> Validator | None:
        descriptor = self._fields.get(name)
        return descriptor.validator if descriptor else None

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._fields)

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __repr__(self) -> str:
        return f"FieldRegistry({list(self._fields)!r})"
