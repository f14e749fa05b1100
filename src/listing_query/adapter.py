"""ListingAdapter — protocol for backend-specific predicate emission."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple, Protocol, runtime_checkable

from .predicates import PredicateKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .predicates import Predicate, SortDirection, SortDirective, WildcardPattern


class ListingPage(NamedTuple):
    """One page of rows plus the total number of matches."""

    rows: list[dict[str, Any]]
    total_count: int


@runtime_checkable
class ListingAdapter(Protocol):
    """Translate compiled predicates into native query state and run it.

    Implementations are single-use: configure, ``await execute()`` once,
    discard. Calls before ``execute()`` are commutative.
    """

    @property
    def accepts_filter_clauses(self) -> bool:
        """Whether a sequence of ANDed filter mappings is accepted."""
        ...

    def apply_equality(self, field: str, value: Any) -> None: ...

    def apply_negated_equality(self, field: str, value: Any) -> None: ...

    def apply_range(self, field: str, lower: Any = None, upper: Any = None) -> None: ...

    def apply_membership(self, field: str, values: Sequence[Any]) -> None: ...

    def apply_pattern(self, field: str, pattern: WildcardPattern) -> None: ...

    def apply_absence(self, field: str) -> None: ...

    def apply_existence(self, field: str) -> None: ...

    def apply_sort(self, field: str, direction: SortDirection) -> None: ...

    def apply_random_sort(self, seed: str) -> None: ...

    def apply_pagination(self, offset: int | None, limit: int | None) -> None: ...

    def apply_text_search(self, text: str) -> None: ...

    async def execute(self) -> ListingPage:
        """Run the query and return rows with the total match count."""
        ...


def apply_predicate(adapter: ListingAdapter, predicate: Predicate) -> None:
    """Dispatch one compiled predicate to the matching adapter call."""
    kind, field, value = predicate.kind, predicate.field, predicate.value
    if kind is PredicateKind.EQUALS:
        adapter.apply_equality(field, value)
    elif kind is PredicateKind.NOT_EQUALS:
        adapter.apply_negated_equality(field, value)
    elif kind is PredicateKind.GREATER_EQUAL:
        adapter.apply_range(field, lower=value)
    elif kind is PredicateKind.LESS_EQUAL:
        adapter.apply_range(field, upper=value)
    elif kind is PredicateKind.IN:
        adapter.apply_membership(field, value)
    elif kind is PredicateKind.PATTERN:
        adapter.apply_pattern(field, value)
    elif kind is PredicateKind.ABSENT:
        adapter.apply_absence(field)
    elif kind is PredicateKind.EXISTS:
        adapter.apply_existence(field)
    else:  # pragma: no cover
        raise ValueError(f"Unsupported predicate kind: {kind}")


def apply_sort_directive(adapter: ListingAdapter, directive: SortDirective) -> None:
    if directive.seed is not None:
        adapter.apply_random_sort(directive.seed)
    else:
        adapter.apply_sort(directive.field, directive.direction)
