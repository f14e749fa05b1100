"""Listing queries: filter/order compilation over relational and search-index backends."""

from __future__ import annotations

from .adapter import ListingAdapter, ListingPage, apply_predicate, apply_sort_directive
from .exceptions import (
    AdapterStateError,
    BackendError,
    BackendQueryError,
    BackendUnavailableError,
    InvalidFilterValueError,
    InvalidParameterError,
    ListingError,
    ListingValidationError,
)
from .fields import FieldDescriptor, FieldKind, FieldRegistry, infer_field_kind
from .filters import compile_filter, compile_filter_clauses, parse_wildcard
from .ordering import compile_order, sanitize_seed
from .params import QueryDescription, QueryRequestParser, parse_json_param
from .predicates import (
    Predicate,
    PredicateKind,
    SortDirection,
    SortDirective,
    WildcardPattern,
)
from .service import CompiledListing, ListingService
from .settings import ListingSettings

__all__ = [
    "AdapterStateError",
    "BackendError",
    "BackendQueryError",
    "BackendUnavailableError",
    "CompiledListing",
    "FieldDescriptor",
    "FieldKind",
    "FieldRegistry",
    "InvalidFilterValueError",
    "InvalidParameterError",
    "ListingAdapter",
    "ListingError",
    "ListingPage",
    "ListingService",
    "ListingSettings",
    "ListingValidationError",
    "Predicate",
    "PredicateKind",
    "QueryDescription",
    "QueryRequestParser",
    "SortDirection",
    "SortDirective",
    "WildcardPattern",
    "apply_predicate",
    "apply_sort_directive",
    "compile_filter",
    "compile_filter_clauses",
    "compile_order",
    "infer_field_kind",
    "parse_json_param",
    "parse_wildcard",
    "sanitize_seed",
]
