"""Tests for validator factories."""

from __future__ import annotations

from datetime import datetime

from listing_query.validators import (
    all_of,
    between,
    length,
    matches,
    of_type,
    one_of,
    run_validator,
)


def test_of_type_lax_and_strict() -> None:
    lax = of_type(int)
    strict = of_type(int, strict=True)
    assert lax(5)
    assert lax("5")
    assert not lax("five")
    assert strict(5)
    assert not strict("5")


def test_one_of() -> None:
    validator = one_of("draft", "published")
    assert validator("draft")
    assert not validator("closed")


def test_matches_requires_full_match() -> None:
    validator = matches(r"[a-z]+")
    assert validator("abc")
    assert not validator("abc1")
    assert not validator(12)


def test_length() -> None:
    validator = length(2, 4)
    assert validator("abc")
    assert not validator("a")
    assert not validator("abcde")
    assert not validator(123)


def test_between_handles_timestamps_and_mismatched_types() -> None:
    validator = between(datetime(2020, 1, 1), datetime(2020, 12, 31))
    assert validator(datetime(2020, 6, 1))
    assert not validator(datetime(2021, 1, 1))
    assert not validator("2020-06-01")


def test_all_of() -> None:
    validator = all_of(length(1, 10), matches(r"\w+"))
    assert validator("word")
    assert not validator("two words")


def test_run_validator() -> None:
    def explode(value: object) -> bool:
        raise ValueError("boom")

    assert run_validator(None, "anything")
    assert run_validator(one_of(1), 1)
    assert not run_validator(one_of(1), 2)
    assert not run_validator(explode, 1)
