"""Tests for the order compiler."""

from __future__ import annotations

import pytest

from listing_query import (
    FieldRegistry,
    InvalidParameterError,
    SortDirection,
    SortDirective,
    compile_order,
    sanitize_seed,
)


def test_unknown_field_is_skipped(registry: FieldRegistry) -> None:
    assert compile_order(
        registry, [{"created_on": "desc"}, {"bogus_field": "asc"}]
    ) == [SortDirective("created_on", SortDirection.DESC)]


def test_entries_keep_caller_order(registry: FieldRegistry) -> None:
    assert compile_order(registry, [{"status": "ASC"}, {"created_on": "Desc"}]) == [
        SortDirective("status", SortDirection.ASC),
        SortDirective("created_on", SortDirection.DESC),
    ]


def test_mapping_order(registry: FieldRegistry) -> None:
    assert compile_order(registry, {"author": "desc", "id": "asc"}) == [
        SortDirective("author", SortDirection.DESC),
        SortDirective("id", SortDirection.ASC),
    ]


@pytest.mark.parametrize("direction", ["up", "", None, 1])
def test_unrecognized_direction_is_skipped(
    registry: FieldRegistry, direction: object
) -> None:
    assert compile_order(registry, [{"title": direction}]) == []


def test_empty_order(registry: FieldRegistry) -> None:
    assert compile_order(registry, []) == []
    assert compile_order(registry, None) == []


@pytest.mark.parametrize(
    "order",
    [
        [{"title": "asc", "status": "desc"}],
        ["title"],
        [{}],
        "title",
    ],
)
def test_malformed_entries_raise(registry: FieldRegistry, order: object) -> None:
    with pytest.raises(InvalidParameterError) as exc_info:
        compile_order(registry, order)
    assert exc_info.value.errors == {"order": ["Wrong 'order' parameter"]}


def test_random_order(registry: FieldRegistry) -> None:
    (directive,) = compile_order(registry, [{"random": "ab-c!12"}])
    assert directive == SortDirective("random", SortDirection.DESC, seed="abc12")
    assert directive.is_random


def test_random_seed_is_truncated(registry: FieldRegistry) -> None:
    (directive,) = compile_order(
        registry, [{"random": "x" * 40}], seed_length=8
    )
    assert directive.seed == "x" * 8


def test_empty_random_seed_is_skipped(registry: FieldRegistry) -> None:
    assert compile_order(registry, [{"random": "!!!"}, {"title": "asc"}]) == [
        SortDirective("title", SortDirection.ASC)
    ]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("seed", "seed"), (12345, "12345"), ("a b/c", "abc"), (None, ""), (True, "")],
)
def test_sanitize_seed(raw: object, expected: str) -> None:
    assert sanitize_seed(raw) == expected
