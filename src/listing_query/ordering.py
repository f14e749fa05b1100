"""Order compiler — OrderSpec -> ordered list of SortDirective."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .exceptions import InvalidParameterError
from .predicates import SortDirection, SortDirective

if TYPE_CHECKING:
    from .fields import FieldRegistry

logger = logging.getLogger(__name__)

RANDOM_FIELD = "random"
DEFAULT_SEED_LENGTH = 16

_SEED_STRIP = re.compile(r"[^a-zA-Z0-9]")


def sanitize_seed(raw: Any, max_length: int = DEFAULT_SEED_LENGTH) -> str:
    """Strip non-alphanumerics from a random-order seed and truncate it."""
    if raw is None or isinstance(raw, (bool, dict, list)):
        return ""
    return _SEED_STRIP.sub("", str(raw))[:max_length]


def compile_order(
    registry: FieldRegistry,
    order_spec: Any,
    *,
    seed_length: int = DEFAULT_SEED_LENGTH,
) -> list[SortDirective]:
    """Compile sort entries in the caller's order.

    Unknown fields and unrecognized directions are skipped; only a
    malformed entry raises.
    """
    directives: list[SortDirective] = []
    for field, raw_direction in _entries(order_spec):
        if field == RANDOM_FIELD:
            seed = sanitize_seed(raw_direction, seed_length)
            if seed:
                directives.append(SortDirective(field, SortDirection.DESC, seed=seed))
            continue
        if not registry.has(field):
            logger.debug("Skipping sort on unknown field %r", field)
            continue
        direction = SortDirection.parse(raw_direction)
        if direction is None:
            logger.debug("Skipping sort on %r: direction %r", field, raw_direction)
            continue
        directives.append(SortDirective(field, direction))
    return directives


def _entries(order_spec: Any) -> list[tuple[str, Any]]:
    if not order_spec:
        return []
    if isinstance(order_spec, Mapping):
        return [(str(field), direction) for field, direction in order_spec.items()]
    if not isinstance(order_spec, list):
        raise InvalidParameterError("order", "Wrong 'order' parameter")
    entries: list[tuple[str, Any]] = []
    for item in order_spec:
        if not isinstance(item, Mapping) or len(item) != 1:
            raise InvalidParameterError("order", "Wrong 'order' parameter")
        ((field, direction),) = item.items()
        entries.append((str(field), direction))
    return entries
