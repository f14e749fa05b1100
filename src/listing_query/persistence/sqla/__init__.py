"""Relational (SQLAlchemy) listing backend."""

from __future__ import annotations

from .adapter import SQLAlchemyListingAdapter, resolve_table
from .source import SQLAlchemyListingSource

__all__ = [
    "SQLAlchemyListingAdapter",
    "SQLAlchemyListingSource",
    "resolve_table",
]
