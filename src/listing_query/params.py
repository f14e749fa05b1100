"""QueryRequestParser — limit, offset, filter, order and free text -> QueryDescription."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .exceptions import InvalidParameterError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .settings import ListingSettings

FilterInput = dict[str, Any] | list[Any]


@dataclass(frozen=True)
class QueryDescription:
    """
    Immutable description of one listing request.

    Attributes:
        limit: Page size, ``0 < limit <= max_limit``.
        offset: Rows to skip; ``None`` when the caller did not supply one.
        filter: Decoded filter JSON (an object, or an array of objects for
            backends that accept filter clauses).
        order: Decoded order JSON.
        text: Free-text query, stripped; ``None`` when empty.
    """

    limit: int
    offset: int | None = None
    filter: FilterInput = field(default_factory=dict)
    order: FilterInput = field(default_factory=list)
    text: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.filter and not self.order and self.text is None


class QueryRequestParser:
    """Parse raw request parameters into a :class:`QueryDescription`."""

    def __init__(self, settings: ListingSettings) -> None:
        self._settings = settings

    @property
    def max_limit(self) -> int:
        return self._settings.max_limit

    def parse(
        self,
        query_params: Mapping[str, Any],
        *,
        limit_key: str = "limit",
        offset_key: str = "offset",
        filter_key: str = "filter",
        order_key: str = "order",
    ) -> QueryDescription:
        """Read the listing parameters from a request mapping."""
        return self.build(
            limit=query_params.get(limit_key),
            offset=query_params.get(offset_key),
            filter=query_params.get(filter_key),
            order=query_params.get(order_key),
            text=self._text_param(query_params),
        )

    def build(
        self,
        *,
        limit: Any = None,
        offset: Any = None,
        filter: Any = None,  # noqa: A002
        order: Any = None,
        text: Any = None,
    ) -> QueryDescription:
        """Validate raw values and return the description."""
        return QueryDescription(
            limit=self._parse_limit(limit),
            offset=self._parse_offset(offset),
            filter=parse_json_param("filter", filter) or {},
            order=parse_json_param("order", order) or [],
            text=_clean_text(text),
        )

    def _text_param(self, query_params: Mapping[str, Any]) -> Any:
        for key in (self._settings.text_param, *self._settings.text_param_aliases):
            value = query_params.get(key)
            if value not in (None, ""):
                return value
        return None

    def _parse_limit(self, raw: Any) -> int:
        limit = _int_param("limit", raw)
        if limit is None or limit <= 0:
            return self.max_limit
        if limit > self.max_limit:
            raise InvalidParameterError(
                "limit",
                f"Value of parameter 'limit' exceeds configured maximum {self.max_limit}",
            )
        return limit

    def _parse_offset(self, raw: Any) -> int | None:
        offset = _int_param("offset", raw)
        if offset is not None and offset < 0:
            raise InvalidParameterError("offset", "'offset' should be positive or 0")
        return offset


def parse_json_param(name: str, raw: Any) -> FilterInput | None:
    """Decode a JSON object/array parameter.

    Absent or empty values return ``None``. Already-decoded dicts and lists
    pass through unchanged.
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, (dict, list)):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidParameterError(name, f"'{name}' JSON data is invalid!") from exc
    if not isinstance(raw, str):
        raise InvalidParameterError(name, f"'{name}' JSON should be object")
    if not raw.strip():
        return None
    try:
        decoded = json.loads(raw)
    except ValueError as exc:
        raise InvalidParameterError(name, f"'{name}' JSON data is invalid!") from exc
    if not isinstance(decoded, (dict, list)):
        raise InvalidParameterError(name, f"'{name}' JSON should be object")
    return decoded


def _int_param(name: str, raw: Any) -> int | None:
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise InvalidParameterError(name, f"'{name}' should be an integer")
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError as exc:
        raise InvalidParameterError(name, f"'{name}' should be an integer") from exc


def _clean_text(raw: Any) -> str | None:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None
