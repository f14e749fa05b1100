"""ListingSettings — explicit configuration for parsers, sources and adapters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_LEGACY_MAX_LIMIT_KEY = "maxLimitListing"


class ListingSettings(BaseModel):
    """Immutable listing configuration.

    Attributes:
        max_limit: Ceiling for the ``limit`` parameter; also the default
            page size when ``limit`` is absent or non-positive.
        deleted_marker: Column that flags soft-deleted rows in the
            relational store. ``None`` disables soft-delete exclusion.
        random_seed_length: Maximum length of a sanitized random-order seed.
        text_param: Request parameter carrying the free-text query.
        text_param_aliases: Legacy parameter names for the free-text query,
            consulted in order when ``text_param`` is absent.
        log_queries: Log compiled native queries at DEBUG level.
    """

    model_config = ConfigDict(frozen=True)

    max_limit: int = Field(default=100, gt=0)
    deleted_marker: str | None = "deleted_on"
    random_seed_length: int = Field(default=16, gt=0)
    text_param: str = "q"
    text_param_aliases: tuple[str, ...] = ("r",)
    log_queries: bool = False

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> ListingSettings:
        """Build settings from a plain dict.

        Also understands the nested ``{"app": {"maxLimitListing": N}}``
        application config layout.
        """
        data = dict(config)
        app = data.pop("app", None)
        if isinstance(app, Mapping) and _LEGACY_MAX_LIMIT_KEY in app:
            data.setdefault("max_limit", app[_LEGACY_MAX_LIMIT_KEY])
        return cls.model_validate(data)
