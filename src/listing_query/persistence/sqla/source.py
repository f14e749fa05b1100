"""SQLAlchemyListingSource — per-entity relational listing configuration."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from ...exceptions import BackendQueryError
from .adapter import SQLAlchemyListingAdapter, resolve_table

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from ...fields import FieldRegistry
    from ...settings import ListingSettings

logger = logging.getLogger(__name__)


class SQLAlchemyListingSource:
    """
    Describes one listable table and hands out single-use adapters.

    Usage::

        source = SQLAlchemyListingSource(ArticleModel, registry, settings)
        page = await service.fetch(source.adapter(session), description)

    ``fetch_by_id`` targets one row explicitly and therefore ignores the
    soft-delete marker; listings never return soft-deleted rows.
    """

    def __init__(
        self,
        table: Any,
        registry: FieldRegistry,
        settings: ListingSettings,
        *,
        text_fields: Sequence[str] = (),
    ) -> None:
        self._table = resolve_table(table)
        self.registry = registry
        self.settings = settings
        self._text_fields = tuple(text_fields)

    def adapter(self, session: AsyncSession) -> SQLAlchemyListingAdapter:
        return SQLAlchemyListingAdapter(
            session,
            self._table,
            self.registry,
            self.settings,
            text_fields=self._text_fields,
        )

    async def fetch_by_id(self, session: AsyncSession, entity_id: Any) -> dict[str, Any] | None:
        """Load one row by identifier, soft-deleted or not."""
        id_column = self._table.c[self.registry.id_field]
        stmt = select(self._table).where(id_column == entity_id)
        try:
            result = await session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error("Loading %s=%r failed: %s", self._table.name, entity_id, exc)
            raise BackendQueryError("Listing query failed") from exc
        row = result.mappings().first()
        return dict(row) if row is not None else None

    async def mark_as_deleted(self, session: AsyncSession, entity_id: Any) -> bool:
        """Set the deleted marker to now; returns False when no row matched."""
        marker = self.settings.deleted_marker
        if not marker or marker not in self._table.c:
            raise BackendQueryError(
                f"Table {self._table.name!r} has no soft-delete marker column"
            )
        id_column = self._table.c[self.registry.id_field]
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        stmt = update(self._table).where(id_column == entity_id).values({marker: now})
        try:
            result = await session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error("Soft delete of %s=%r failed: %s", self._table.name, entity_id, exc)
            raise BackendQueryError("Soft delete failed") from exc
        return bool(result.rowcount)
