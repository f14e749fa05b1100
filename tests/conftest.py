"""Shared fixtures: an article registry and a small data set."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest

from listing_query import (
    FieldRegistry,
    ListingSettings,
    SortDirection,
    SortDirective,
)
from listing_query.validators import length, of_type, one_of

ARTICLE_FIELDS = {
    "id": None,
    "title": length(1, 200),
    "status": one_of("draft", "published", "closed"),
    "author": None,
    "rating": of_type(int),
    "is_active": None,
    "created_on": None,
}

# ``deleted_on`` set means soft-deleted; a4 lacks status and author.
ARTICLES: list[dict[str, Any]] = [
    {
        "id": "a1",
        "title": "blacksmith tools",
        "status": "published",
        "author": "ann",
        "rating": 5,
        "is_active": True,
        "created_on": datetime(2020, 1, 5, 9, 0),
        "deleted_on": None,
    },
    {
        "id": "a2",
        "title": "smithing basics",
        "status": "draft",
        "author": "bob",
        "rating": 3,
        "is_active": False,
        "created_on": datetime(2020, 1, 20, 12, 30),
        "deleted_on": None,
    },
    {
        "id": "a3",
        "title": "gardening",
        "status": "closed",
        "author": "ann",
        "rating": 4,
        "is_active": True,
        "created_on": datetime(2020, 2, 1, 8, 0),
        "deleted_on": None,
    },
    {
        "id": "a4",
        "title": "untitled notes",
        "status": None,
        "author": None,
        "rating": 1,
        "is_active": True,
        "created_on": datetime(2019, 12, 31, 23, 59),
        "deleted_on": None,
    },
    {
        "id": "a5",
        "title": "the smith family",
        "status": "published",
        "author": "cid",
        "rating": 2,
        "is_active": False,
        "created_on": datetime(2020, 1, 31, 0, 0),
        "deleted_on": None,
    },
    {
        "id": "a6",
        "title": "removed smith draft",
        "status": "draft",
        "author": "bob",
        "rating": 5,
        "is_active": True,
        "created_on": datetime(2020, 1, 10, 10, 0),
        "deleted_on": datetime(2020, 3, 1, 0, 0),
    },
]

LIVE_ARTICLE_IDS = [a["id"] for a in ARTICLES if a["deleted_on"] is None]


@pytest.fixture
def registry() -> FieldRegistry:
    return FieldRegistry(ARTICLE_FIELDS)


@pytest.fixture
def newest_first_registry() -> FieldRegistry:
    return FieldRegistry(
        ARTICLE_FIELDS,
        default_order=(SortDirective("created_on", SortDirection.DESC),),
    )


@pytest.fixture
def settings() -> ListingSettings:
    return ListingSettings(max_limit=50)


@pytest.fixture
def articles() -> list[dict[str, Any]]:
    return [dict(article) for article in ARTICLES]


@pytest.fixture
def live_article_ids() -> list[str]:
    return list(LIVE_ARTICLE_IDS)
