"""Filter value variants, classification and per-kind coercion."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

from dateutil import parser as dt_parser

from .exceptions import InvalidFilterValueError
from .fields import FieldKind

NOT_KEY = "not"
FROM_KEY = "from"
TO_KEY = "to"

_TRUE_STRINGS = frozenset({"1", "true", "yes", "y", "on"})
_FALSE_STRINGS = frozenset({"", "0", "false", "no", "n", "off"})


@dataclass(frozen=True)
class Scalar:
    value: Any


@dataclass(frozen=True)
class ListValue:
    values: tuple[Any, ...]


@dataclass(frozen=True)
class Null:
    pass


@dataclass(frozen=True)
class Range:
    lower: Any = None
    upper: Any = None
    raw: tuple[Any, ...] = ()


@dataclass(frozen=True)
class Not:
    values: tuple[Any, ...]


FilterValue = Scalar | ListValue | Null | Range | Not


def classify(raw: Any) -> FilterValue:
    """Pick the single variant a raw decoded JSON value represents."""
    if raw is None:
        return Null()
    if isinstance(raw, list):
        return ListValue(tuple(raw))
    if isinstance(raw, dict):
        if NOT_KEY in raw:
            negated = raw[NOT_KEY]
            return Not(tuple(negated) if isinstance(negated, list) else (negated,))
        if FROM_KEY in raw or TO_KEY in raw:
            return Range(
                lower=raw.get(FROM_KEY),
                upper=raw.get(TO_KEY),
                raw=tuple(raw.values()),
            )
        return ListValue(tuple(raw.values()))
    return Scalar(raw)


def is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def coerce_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return bool(value)


def parse_timestamp(field: str, value: Any) -> datetime:
    """Parse free-form date input into a canonical timestamp.

    The canonical form is a naive ``datetime`` in UTC. Date-only input
    resolves to the start of that day.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, datetime.min.time())
    elif isinstance(value, str) and value.strip():
        try:
            parsed = dt_parser.parse(value.strip())
        except (ValueError, OverflowError) as exc:
            raise InvalidFilterValueError(
                field, "Wrong format of datetime value"
            ) from exc
    else:
        raise InvalidFilterValueError(field, "Wrong format of datetime value")
    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        except (ValueError, OverflowError) as exc:
            raise InvalidFilterValueError(
                field, "Wrong format of datetime value"
            ) from exc
    return parsed


def normalize(field: str, kind: FieldKind, value: Any) -> Any:
    """Coerce a scalar to the canonical representation for ``kind``."""
    if kind is FieldKind.BOOLEAN:
        return coerce_boolean(value)
    if kind is FieldKind.DATETIME:
        return parse_timestamp(field, value)
    return value
