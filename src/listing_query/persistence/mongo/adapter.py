"""
Mongo (search index) listing adapter.

Predicates are collected as ``$and`` conditions; the page and the total
match count are produced by one aggregation so that ``total_count`` is
the store's own figure for the executed query. Unlike the relational
adapter this one accepts filter clauses and random ordering.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pymongo.errors import ConnectionFailure, PyMongoError

from ...adapter import ListingPage
from ...exceptions import AdapterStateError, BackendQueryError, BackendUnavailableError
from . import query_builder as qb

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ...fields import FieldRegistry
    from ...predicates import SortDirection, WildcardPattern
    from ...settings import ListingSettings

logger = logging.getLogger(__name__)

MONGO_ID = "_id"


class MongoListingAdapter:
    """Single-use search-index implementation of ``ListingAdapter``."""

    accepts_filter_clauses = True

    def __init__(
        self,
        collection: Any,
        registry: FieldRegistry,
        settings: ListingSettings,
    ) -> None:
        self._collection = collection
        self._registry = registry
        self._settings = settings
        self._conditions: list[dict[str, Any]] = []
        self._sort: list[tuple[str, int]] = []
        self._random_seed: str | None = None
        self._text: str | None = None
        self._offset: int | None = None
        self._limit: int | None = None
        self._total_count = 0
        self._executed = False

    @property
    def total_count(self) -> int:
        """Match count reported by the last ``execute()``; 0 before it."""
        return self._total_count

    # -- capability surface -------------------------------------------------

    def apply_equality(self, field: str, value: Any) -> None:
        self._add(qb.equality(self._path(field), value))

    def apply_negated_equality(self, field: str, value: Any) -> None:
        self._add(qb.negated_equality(self._path(field), value))

    def apply_range(self, field: str, lower: Any = None, upper: Any = None) -> None:
        if lower is not None:
            self._add(qb.lower_bound(self._path(field), lower))
        if upper is not None:
            self._add(qb.upper_bound(self._path(field), upper))

    def apply_membership(self, field: str, values: Sequence[Any]) -> None:
        self._add(qb.membership(self._path(field), values))

    def apply_pattern(self, field: str, pattern: WildcardPattern) -> None:
        self._add(qb.pattern(self._path(field), pattern))

    def apply_absence(self, field: str) -> None:
        self._add(qb.absence(self._path(field)))

    def apply_existence(self, field: str) -> None:
        self._add(qb.existence(self._path(field)))

    def apply_sort(self, field: str, direction: SortDirection) -> None:
        self._ensure_open()
        self._sort.append((self._path(field), qb.sort_key(direction)))

    def apply_random_sort(self, seed: str) -> None:
        self._ensure_open()
        self._random_seed = seed
        self._sort.append((qb.RANDOM_SORT_FIELD, -1))

    def apply_pagination(self, offset: int | None, limit: int | None) -> None:
        self._ensure_open()
        self._offset = offset
        self._limit = limit

    def apply_text_search(self, text: str) -> None:
        self._ensure_open()
        self._text = qb.escape_text(text) or None

    def build_pipeline(self) -> list[dict[str, Any]]:
        return qb.build_pipeline(
            conditions=self._conditions,
            text=self._text,
            sort=self._with_tiebreaker(self._sort or self._default_sort()),
            random_seed=self._random_seed,
            offset=self._offset,
            limit=self._limit,
        )

    async def execute(self) -> ListingPage:
        self._ensure_open()
        self._executed = True
        pipeline = self.build_pipeline()
        if self._settings.log_queries:
            logger.debug("Listing pipeline on %s: %s", self._collection.name, pipeline)
        try:
            facets = [doc async for doc in self._collection.aggregate(pipeline)]
        except ConnectionFailure as exc:
            logger.error("Search index unavailable: %s", exc)
            raise BackendUnavailableError("Listing backend is unavailable") from exc
        except PyMongoError as exc:
            logger.error("Search index listing failed: %s", exc)
            raise BackendQueryError("Listing query failed") from exc
        facet = facets[0] if facets else {}
        totals = facet.get(qb.TOTAL_FACET) or []
        self._total_count = int(totals[0]["count"]) if totals else 0
        rows = [self._to_row(doc) for doc in facet.get(qb.ROWS_FACET, [])]
        return ListingPage(rows=rows, total_count=self._total_count)

    # -- internals ----------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._executed:
            raise AdapterStateError("Listing adapter has already been executed")

    def _add(self, condition: dict[str, Any]) -> None:
        self._ensure_open()
        self._conditions.append(condition)

    def _path(self, field: str) -> str:
        return MONGO_ID if field == self._registry.id_field else field

    def _default_sort(self) -> list[tuple[str, int]]:
        return [
            (self._path(d.field), qb.sort_key(d.direction))
            for d in self._registry.default_order
        ]

    @staticmethod
    def _with_tiebreaker(sort: list[tuple[str, int]]) -> list[tuple[str, int]]:
        if any(field == MONGO_ID for field, _ in sort):
            return sort
        return [*sort, (MONGO_ID, 1)]

    def _to_row(self, doc: dict[str, Any]) -> dict[str, Any]:
        row = dict(doc)
        if MONGO_ID in row:
            doc_id = row.pop(MONGO_ID)
            row.setdefault(self._registry.id_field, doc_id if isinstance(doc_id, str) else str(doc_id))
        return row
