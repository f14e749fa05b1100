"""ListingService — compile a QueryDescription and run it through an adapter."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, NamedTuple

from .adapter import apply_predicate, apply_sort_directive
from .exceptions import InvalidParameterError
from .filters import compile_filter, compile_filter_clauses
from .ordering import compile_order
from .params import QueryRequestParser

if TYPE_CHECKING:
    from .adapter import ListingAdapter, ListingPage
    from .fields import FieldRegistry
    from .params import QueryDescription
    from .predicates import Predicate, SortDirective
    from .settings import ListingSettings

logger = logging.getLogger(__name__)


class CompiledListing(NamedTuple):
    predicates: list[Predicate]
    sort: list[SortDirective]


class ListingService:
    """
    Runs listing requests for one entity type.

    Everything caller-supplied is compiled before the adapter sees a
    single call, so a bad filter or order never reaches the store::

        service = ListingService(registry, settings)
        page = await service.fetch_params(source.adapter(session), request.query_params)
    """

    def __init__(self, registry: FieldRegistry, settings: ListingSettings) -> None:
        self._registry = registry
        self._settings = settings
        self._parser = QueryRequestParser(settings)

    @property
    def parser(self) -> QueryRequestParser:
        return self._parser

    def compile(
        self, description: QueryDescription, *, accepts_filter_clauses: bool
    ) -> CompiledListing:
        filter_input = self._without_deleted_marker(description.filter)
        if accepts_filter_clauses:
            predicates = compile_filter_clauses(self._registry, filter_input)
        elif isinstance(filter_input, list):
            raise InvalidParameterError("filter", "'filter' JSON should be object")
        else:
            predicates = compile_filter(self._registry, filter_input)
        sort = compile_order(
            self._registry,
            description.order,
            seed_length=self._settings.random_seed_length,
        )
        return CompiledListing(predicates, sort)

    def _without_deleted_marker(self, filter_input: Any) -> Any:
        # The soft-delete marker is never filterable.
        marker = self._settings.deleted_marker
        if not marker:
            return filter_input
        if isinstance(filter_input, Mapping):
            return {k: v for k, v in filter_input.items() if k != marker}
        if isinstance(filter_input, list):
            return [
                self._without_deleted_marker(clause)
                if isinstance(clause, Mapping)
                else clause
                for clause in filter_input
            ]
        return filter_input

    async def fetch(
        self, adapter: ListingAdapter, description: QueryDescription
    ) -> ListingPage:
        compiled = self.compile(
            description, accepts_filter_clauses=adapter.accepts_filter_clauses
        )
        for predicate in compiled.predicates:
            apply_predicate(adapter, predicate)
        for directive in compiled.sort:
            apply_sort_directive(adapter, directive)
        adapter.apply_pagination(description.offset, description.limit)
        if description.text:
            adapter.apply_text_search(description.text)
        page = await adapter.execute()
        logger.debug(
            "Listing returned %d of %d rows (%d predicates, %d sort directives)",
            len(page.rows),
            page.total_count,
            len(compiled.predicates),
            len(compiled.sort),
        )
        return page

    async def fetch_params(
        self, adapter: ListingAdapter, query_params: Mapping[str, Any]
    ) -> ListingPage:
        return await self.fetch(adapter, self._parser.parse(query_params))
