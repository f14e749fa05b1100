"""Search-index (MongoDB) listing backend."""

from __future__ import annotations

from .adapter import MongoListingAdapter
from .connection import MongoConnectionManager
from .source import MongoListingSource

__all__ = [
    "MongoConnectionManager",
    "MongoListingAdapter",
    "MongoListingSource",
]
