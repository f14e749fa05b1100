"""
Filter predicate compiler.

Turns a FilterSpec (``{field: raw_value}``) into an ordered list of
backend-neutral :class:`~listing_query.predicates.Predicate` objects.
Fields are visited in registry order, never in filter order, so two
logically equal filters always compile to the same predicate sequence.

Per field, exactly one clause type is compiled, in priority order:

1. ``{"not": [...]}``: one negated equality per value (``null`` means
   "the field must be set").
2. ``{"from": .., "to": ..}``: inclusive bounds; falls back to membership
   over the raw object when neither bound is usable.
3. arrays (and objects without special keys): membership.
4. ``null``: absence.
5. scalars: boolean canonicalization, timestamp parsing, ``%`` wildcard
   patterns, or plain equality.

Compilation either succeeds completely or raises; callers never see a
partial predicate list.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .exceptions import InvalidFilterValueError, InvalidParameterError
from .fields import FieldKind
from .predicates import Predicate, PredicateKind, WildcardPattern
from .validators import run_validator
from .values import ListValue, Not, Null, Range, Scalar, classify, is_scalar, normalize

if TYPE_CHECKING:
    from .fields import FieldDescriptor, FieldRegistry

logger = logging.getLogger(__name__)

WILDCARD = "%"


def compile_filter(
    registry: FieldRegistry, filter_spec: Mapping[str, Any]
) -> list[Predicate]:
    """Compile a single filter mapping."""
    if not isinstance(filter_spec, Mapping):
        raise InvalidParameterError("filter", "'filter' JSON should be object")
    predicates: list[Predicate] = []
    for descriptor in registry:
        if descriptor.name not in filter_spec:
            continue
        predicates.extend(_compile_field(descriptor, filter_spec[descriptor.name]))
    logger.debug("Compiled filter %s -> %s", filter_spec, predicates)
    return predicates


def compile_filter_clauses(registry: FieldRegistry, clauses: Any) -> list[Predicate]:
    """Compile a sequence of filter mappings, ANDed together.

    A bare mapping counts as a single clause.
    """
    if isinstance(clauses, Mapping):
        return compile_filter(registry, clauses)
    if not isinstance(clauses, list):
        raise InvalidParameterError("filter", "'filter' JSON should be object")
    predicates: list[Predicate] = []
    for clause in clauses:
        if not isinstance(clause, Mapping):
            raise InvalidParameterError(
                "filter", "'filter' clauses should be JSON objects"
            )
        predicates.extend(compile_filter(registry, clause))
    return predicates


def _compile_field(descriptor: FieldDescriptor, raw: Any) -> list[Predicate]:
    value = classify(raw)
    if isinstance(value, Not):
        return _compile_not(descriptor, value)
    if isinstance(value, Range):
        return _compile_range(descriptor, value)
    if isinstance(value, ListValue):
        return [_compile_membership(descriptor, value.values)]
    if isinstance(value, Null):
        return [Predicate(PredicateKind.ABSENT, descriptor.name)]
    return [_compile_scalar(descriptor, value)]


def _compile_not(descriptor: FieldDescriptor, value: Not) -> list[Predicate]:
    predicates: list[Predicate] = []
    for item in value.values:
        if item is None:
            predicates.append(Predicate(PredicateKind.EXISTS, descriptor.name))
        elif is_scalar(item):
            normalized = normalize(descriptor.name, descriptor.kind, item)
            predicates.append(
                Predicate(PredicateKind.NOT_EQUALS, descriptor.name, normalized)
            )
    return predicates


def _compile_range(descriptor: FieldDescriptor, value: Range) -> list[Predicate]:
    predicates: list[Predicate] = []
    for bound, kind in (
        (value.lower, PredicateKind.GREATER_EQUAL),
        (value.upper, PredicateKind.LESS_EQUAL),
    ):
        if bound is None or not is_scalar(bound):
            continue
        resolved = _bound_value(descriptor, bound)
        _validate(descriptor, resolved)
        predicates.append(Predicate(kind, descriptor.name, resolved))
    if predicates:
        return predicates
    # Neither bound usable: legacy membership over the raw object.
    return [_compile_membership(descriptor, value.raw)]


def _bound_value(descriptor: FieldDescriptor, bound: Any) -> Any:
    if descriptor.kind is FieldKind.DATETIME:
        return normalize(descriptor.name, descriptor.kind, bound)
    return bound


def _compile_membership(
    descriptor: FieldDescriptor, members: tuple[Any, ...]
) -> Predicate:
    values: list[Any] = []
    for member in members:
        if member is None or not is_scalar(member):
            continue
        normalized = normalize(descriptor.name, descriptor.kind, member)
        _validate(descriptor, normalized)
        values.append(normalized)
    return Predicate(PredicateKind.IN, descriptor.name, tuple(values))


def _compile_scalar(descriptor: FieldDescriptor, value: Scalar) -> Predicate:
    raw = value.value
    if descriptor.kind is FieldKind.STRING and isinstance(raw, str) and WILDCARD in raw:
        pattern = parse_wildcard(raw)
        if pattern is not None:
            return Predicate(PredicateKind.PATTERN, descriptor.name, pattern)
    normalized = normalize(descriptor.name, descriptor.kind, raw)
    _validate(descriptor, normalized)
    return Predicate(PredicateKind.EQUALS, descriptor.name, normalized)


def parse_wildcard(raw: str) -> WildcardPattern | None:
    """Map ``%`` markers at the string ends to a :class:`WildcardPattern`.

    Returns ``None`` when the value must be matched literally: no marker
    at either end, or a marker left in the middle.
    """
    leading = raw.startswith(WILDCARD)
    text = raw[1:] if leading else raw
    trailing = text.endswith(WILDCARD)
    text = text[:-1] if trailing else text
    if not (leading or trailing) or WILDCARD in text:
        return None
    return WildcardPattern(text=text, leading=leading, trailing=trailing)


def _validate(descriptor: FieldDescriptor, value: Any) -> None:
    if not run_validator(descriptor.validator, value):
        raise InvalidFilterValueError(
            descriptor.name, f"Wrong '{descriptor.name}' parameter"
        )
