"""MongoListingSource — per-collection search-index listing configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .adapter import MongoListingAdapter

if TYPE_CHECKING:
    from ...fields import FieldRegistry
    from ...settings import ListingSettings
    from .connection import MongoConnectionManager


class MongoListingSource:
    """Describes one listable collection and hands out single-use adapters."""

    def __init__(
        self,
        connection: MongoConnectionManager,
        collection: str,
        registry: FieldRegistry,
        settings: ListingSettings,
    ) -> None:
        self._connection = connection
        self._collection_name = collection
        self.registry = registry
        self.settings = settings

    def adapter(self) -> MongoListingAdapter:
        return MongoListingAdapter(
            self._connection.collection(self._collection_name),
            self.registry,
            self.settings,
        )
