"""Backend fixtures: an aiosqlite table and a mongomock collection holding the same articles."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

import pytest
from mongomock_motor import AsyncMongoMockClient
from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from listing_query import FieldRegistry, ListingService, ListingSettings
from listing_query.persistence.mongo import MongoConnectionManager, MongoListingSource
from listing_query.persistence.sqla import SQLAlchemyListingSource

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


class Base(DeclarativeBase):
    pass


class ArticleModel(Base):
    __tablename__ = "articles"
    id: Mapped[str] = mapped_column(String, primary_key=True)
    title: Mapped[str] = mapped_column(String)
    status: Mapped[str | None] = mapped_column(String, nullable=True)
    author: Mapped[str | None] = mapped_column(String, nullable=True)
    rating: Mapped[int] = mapped_column(Integer)
    is_active: Mapped[bool] = mapped_column(Boolean)
    created_on: Mapped[datetime] = mapped_column(DateTime)
    deleted_on: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)


def to_document(article: dict[str, Any]) -> dict[str, Any]:
    """Index form of an article: ``_id`` key, unset fields left out."""
    doc = {k: v for k, v in article.items() if v is not None and k != "deleted_on"}
    doc["_id"] = doc.pop("id")
    return doc


# ---------------------------------------------------------------------------
# Relational
# ---------------------------------------------------------------------------


@pytest.fixture
def article_model() -> type[ArticleModel]:
    return ArticleModel


@pytest.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def session(
    engine, articles: list[dict[str, Any]]
) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as sess:
        sess.add_all(ArticleModel(**article) for article in articles)
        await sess.commit()
        yield sess


@pytest.fixture
def sql_source(
    registry: FieldRegistry, settings: ListingSettings
) -> SQLAlchemyListingSource:
    return SQLAlchemyListingSource(
        ArticleModel, registry, settings, text_fields=("title",)
    )


# ---------------------------------------------------------------------------
# Search index
# ---------------------------------------------------------------------------


@pytest.fixture
def mongo_connection() -> MongoConnectionManager:
    """Connection manager backed by mongomock instead of a live server."""
    return MongoConnectionManager(
        "mongodb://mock:27017",
        database="test_db",
        client=AsyncMongoMockClient(default_database_name="test_db"),
    )


@pytest.fixture
def article_documents(articles: list[dict[str, Any]]) -> list[dict[str, Any]]:
    # The index only ever holds live articles.
    return [to_document(a) for a in articles if a["deleted_on"] is None]


@pytest.fixture
async def mongo_source(
    mongo_connection: MongoConnectionManager,
    registry: FieldRegistry,
    settings: ListingSettings,
    article_documents: list[dict[str, Any]],
) -> MongoListingSource:
    await mongo_connection.collection("articles").insert_many(article_documents)
    return MongoListingSource(mongo_connection, "articles", registry, settings)


@pytest.fixture
def service(registry: FieldRegistry, settings: ListingSettings) -> ListingService:
    return ListingService(registry, settings)
