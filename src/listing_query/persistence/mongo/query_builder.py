"""Mongo query fragments for compiled listing predicates."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from ...predicates import SortDirection

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ...predicates import WildcardPattern

RANDOM_SORT_FIELD = "_random_sort"
TOTAL_FACET = "total"
ROWS_FACET = "rows"

_TEXT_STRIP = re.compile(r'["\\]')


def equality(field: str, value: Any) -> dict[str, Any]:
    return {field: {"$eq": value}}


def negated_equality(field: str, value: Any) -> dict[str, Any]:
    # $ne also matches documents lacking the field.
    return {field: {"$ne": value}}


def lower_bound(field: str, value: Any) -> dict[str, Any]:
    return {field: {"$gte": value}}


def upper_bound(field: str, value: Any) -> dict[str, Any]:
    return {field: {"$lte": value}}


def membership(field: str, values: Sequence[Any]) -> dict[str, Any]:
    return {field: {"$in": list(values)}}


def pattern(field: str, wildcard: WildcardPattern) -> dict[str, Any]:
    regex = re.escape(wildcard.text)
    if not wildcard.leading:
        regex = "^" + regex
    if not wildcard.trailing:
        regex = regex + "$"
    return {field: {"$regex": regex}}


def absence(field: str) -> dict[str, Any]:
    return {"$or": [{field: {"$exists": False}}, {field: {"$eq": None}}]}


def existence(field: str) -> dict[str, Any]:
    return {field: {"$exists": True, "$ne": None}}


def sort_key(direction: SortDirection) -> int:
    return -1 if direction is SortDirection.DESC else 1


def escape_text(text: str) -> str:
    """Neutralize ``$text`` operators: phrases, escapes and negated terms."""
    terms = _TEXT_STRIP.sub(" ", text).split()
    return " ".join(term.lstrip("-") for term in terms if term.lstrip("-"))


def random_sort_stage(seed: str) -> dict[str, Any]:
    """Derive a per-document sort key from the seed and the document id.

    The same seed always yields the same ordering.
    """
    return {
        "$addFields": {
            RANDOM_SORT_FIELD: {
                "$toHashedIndexKey": {"$concat": [seed, {"$toString": "$_id"}]}
            }
        }
    }


def build_pipeline(
    *,
    conditions: Sequence[dict[str, Any]],
    text: str | None,
    sort: Sequence[tuple[str, int]],
    random_seed: str | None,
    offset: int | None,
    limit: int | None,
) -> list[dict[str, Any]]:
    """Assemble the aggregation pipeline.

    The page and the total count come back together in one ``$facet``
    document: ``{"rows": [...], "total": [{"count": N}]}``.
    """
    pipeline: list[dict[str, Any]] = []
    match: dict[str, Any] = {}
    if text:
        match["$text"] = {"$search": text}
    if conditions:
        match["$and"] = list(conditions)
    if match:
        pipeline.append({"$match": match})
    if random_seed is not None:
        pipeline.append(random_sort_stage(random_seed))
    rows: list[dict[str, Any]] = [{"$sort": dict(sort)}]
    if offset:
        rows.append({"$skip": offset})
    if limit is not None:
        rows.append({"$limit": limit})
    if random_seed is not None:
        rows.append({"$project": {RANDOM_SORT_FIELD: 0}})
    pipeline.append({"$facet": {ROWS_FACET: rows, TOTAL_FACET: [{"$count": "count"}]}})
    return pipeline
