"""
SQLAlchemy listing adapter.

Collects compiled predicates as ``ColumnElement[bool]`` conditions over a
single table and runs one ``SELECT`` for the page plus one ``COUNT(*)``
over the same conditions. Rows carrying a non-null deleted marker are
excluded from both.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import and_, asc, desc, func, or_, select
from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    InterfaceError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from ...adapter import ListingPage
from ...exceptions import (
    AdapterStateError,
    BackendQueryError,
    BackendUnavailableError,
)
from ...predicates import SortDirection, WildcardPattern

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import ColumnElement, Select, Table
    from sqlalchemy.ext.asyncio import AsyncSession

    from ...fields import FieldRegistry
    from ...settings import ListingSettings

logger = logging.getLogger(__name__)


def _is_unavailable(exc: SQLAlchemyError) -> bool:
    if isinstance(exc, (DisconnectionError, InterfaceError, PoolTimeoutError)):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


def _order_by(column: Any, direction: SortDirection) -> Any:
    """NULLs rank lowest, as in the search index, whatever the dialect's default."""
    if direction is SortDirection.DESC:
        return desc(column).nulls_last()
    return asc(column).nulls_first()


def resolve_table(table_or_model: Any) -> Table:
    """Accept a ``Table`` or a declarative model class."""
    return cast("Table", getattr(table_or_model, "__table__", table_or_model))


class SQLAlchemyListingAdapter:
    """Single-use relational implementation of ``ListingAdapter``.

    Filter clauses (arrays of filter objects) are not accepted; the
    relational listing takes one flat filter mapping.
    """

    accepts_filter_clauses = False

    def __init__(
        self,
        session: AsyncSession,
        table: Any,
        registry: FieldRegistry,
        settings: ListingSettings,
        *,
        text_fields: Sequence[str] = (),
    ) -> None:
        self._session = session
        self._table = resolve_table(table)
        self._registry = registry
        self._settings = settings
        self._text_fields = tuple(text_fields)
        self._conditions: list[ColumnElement[bool]] = []
        self._order: list[Any] = []
        self._offset: int | None = None
        self._limit: int | None = None
        self._executed = False

    # -- capability surface -------------------------------------------------

    def apply_equality(self, field: str, value: Any) -> None:
        self._add(self._column(field) == value)

    def apply_negated_equality(self, field: str, value: Any) -> None:
        # Rows without a value are "not equal" too, as in the search index.
        column = self._column(field)
        self._add(or_(column.is_(None), column != value))

    def apply_range(self, field: str, lower: Any = None, upper: Any = None) -> None:
        column = self._column(field)
        if lower is not None:
            self._add(column >= lower)
        if upper is not None:
            self._add(column <= upper)

    def apply_membership(self, field: str, values: Sequence[Any]) -> None:
        self._add(self._column(field).in_(list(values)))

    def apply_pattern(self, field: str, pattern: WildcardPattern) -> None:
        self._add(self._column(field).like(pattern.to_like(), escape="\\"))

    def apply_absence(self, field: str) -> None:
        self._add(self._column(field).is_(None))

    def apply_existence(self, field: str) -> None:
        self._add(self._column(field).is_not(None))

    def apply_sort(self, field: str, direction: SortDirection) -> None:
        self._ensure_open()
        self._order.append(_order_by(self._column(field), direction))

    def apply_random_sort(self, seed: str) -> None:
        self._ensure_open()
        logger.debug("Random ordering is not supported by %s; skipped", self._table.name)

    def apply_pagination(self, offset: int | None, limit: int | None) -> None:
        self._ensure_open()
        self._offset = offset
        self._limit = limit

    def apply_text_search(self, text: str) -> None:
        if not self._text_fields:
            logger.debug("No text fields declared for %s; free text ignored", self._table.name)
            return
        like = WildcardPattern(text, leading=True, trailing=True).to_like()
        self._add(
            or_(*(self._column(f).ilike(like, escape="\\") for f in self._text_fields))
        )

    async def execute(self) -> ListingPage:
        self._ensure_open()
        self._executed = True
        where = self._where_clause()
        stmt = self._select_page(where)
        count_stmt = select(func.count()).select_from(self._table)
        if where is not None:
            count_stmt = count_stmt.where(where)
        if self._settings.log_queries:
            logger.debug("Listing query on %s: %s", self._table.name, stmt)
        try:
            total = (await self._session.execute(count_stmt)).scalar_one()
            result = await self._session.execute(stmt)
            rows = [dict(row) for row in result.mappings().all()]
        except SQLAlchemyError as exc:
            if not _is_unavailable(exc):
                logger.error("Relational listing on %s failed: %s", self._table.name, exc)
                raise BackendQueryError("Listing query failed") from exc
            logger.error("Relational store unavailable for %s: %s", self._table.name, exc)
            raise BackendUnavailableError("Listing backend is unavailable") from exc
        except OSError as exc:
            logger.error("Relational store unreachable for %s: %s", self._table.name, exc)
            raise BackendUnavailableError("Listing backend is unavailable") from exc
        return ListingPage(rows=rows, total_count=int(total))

    # -- internals ----------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._executed:
            raise AdapterStateError("Listing adapter has already been executed")

    def _add(self, condition: ColumnElement[bool]) -> None:
        self._ensure_open()
        self._conditions.append(condition)

    def _column(self, field: str) -> Any:
        try:
            return self._table.c[field]
        except KeyError as exc:
            raise BackendQueryError(
                f"Table {self._table.name!r} has no column {field!r}"
            ) from exc

    def _where_clause(self) -> ColumnElement[bool] | None:
        conditions = list(self._conditions)
        marker = self._settings.deleted_marker
        if marker and marker in self._table.c:
            conditions.append(self._table.c[marker].is_(None))
        if not conditions:
            return None
        return and_(*conditions) if len(conditions) > 1 else conditions[0]

    def _default_order(self) -> list[Any]:
        order: list[Any] = []
        for directive in self._registry.default_order:
            if directive.field in self._table.c:
                order.append(
                    _order_by(self._table.c[directive.field], directive.direction)
                )
        return order

    def _tiebreaker(self) -> list[Any]:
        id_field = self._registry.id_field
        if id_field in self._table.c:
            return [asc(self._table.c[id_field])]
        return []

    def _select_page(self, where: ColumnElement[bool] | None) -> Select[Any]:
        stmt = select(self._table)
        if where is not None:
            stmt = stmt.where(where)
        order = (self._order or self._default_order()) + self._tiebreaker()
        if order:
            stmt = stmt.order_by(*order)
        if self._offset is not None:
            stmt = stmt.offset(self._offset)
        if self._limit is not None:
            stmt = stmt.limit(self._limit)
        return stmt
