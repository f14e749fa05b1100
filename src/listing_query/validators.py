"""Field validator factories.

A validator is any ``value -> bool`` callable. The factories below cover
the rules entity definitions usually need; anything else can be a plain
function or lambda.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

if TYPE_CHECKING:
    from .fields import Validator


def of_type(python_type: Any, *, strict: bool = False) -> Validator:
    """Accept values pydantic can validate as ``python_type``."""
    adapter: TypeAdapter[Any] = TypeAdapter(python_type)

    def _validate(value: Any) -> bool:
        try:
            adapter.validate_python(value, strict=strict)
        except PydanticValidationError:
            return False
        return True

    return _validate


def one_of(*choices: Any) -> Validator:
    allowed = frozenset(choices)
    return lambda value: value in allowed


def matches(pattern: str | re.Pattern[str]) -> Validator:
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    return lambda value: isinstance(value, str) and regex.fullmatch(value) is not None


def length(min_length: int = 0, max_length: int | None = None) -> Validator:
    def _validate(value: Any) -> bool:
        if not isinstance(value, str):
            return False
        if len(value) < min_length:
            return False
        return max_length is None or len(value) <= max_length

    return _validate


def between(minimum: Any = None, maximum: Any = None) -> Validator:
    """Inclusive bounds; works for numbers and timestamps alike."""

    def _validate(value: Any) -> bool:
        try:
            if minimum is not None and value < minimum:
                return False
            if maximum is not None and value > maximum:
                return False
        except TypeError:
            return False
        return True

    return _validate


def all_of(*validators: Validator) -> Validator:
    return lambda value: all(v(value) for v in validators)


def run_validator(validator: Validator | None, value: Any) -> bool:
    """Run ``validator``; a raising validator counts as a failure."""
    if validator is None:
        return True
    try:
        return bool(validator(value))
    except (TypeError, ValueError, AttributeError):
        return False
