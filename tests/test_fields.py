"""Tests for FieldRegistry and field kind inference."""

from __future__ import annotations

import pytest

from listing_query import (
    FieldDescriptor,
    FieldKind,
    FieldRegistry,
    SortDirection,
    SortDirective,
    infer_field_kind,
)


@pytest.mark.parametrize(
    ("name", "kind"),
    [
        ("is_active", FieldKind.BOOLEAN),
        ("created_on", FieldKind.DATETIME),
        ("is_logo_on", FieldKind.BOOLEAN),
        ("title", FieldKind.STRING),
        ("island", FieldKind.STRING),
        ("online", FieldKind.STRING),
    ],
)
def test_infer_field_kind(name: str, kind: FieldKind) -> None:
    assert infer_field_kind(name) is kind


def test_registry_preserves_declaration_order(registry: FieldRegistry) -> None:
    assert registry.names == (
        "id",
        "title",
        "status",
        "author",
        "rating",
        "is_active",
        "created_on",
    )
    assert [d.name for d in registry] == list(registry.names)
    assert len(registry) == 7


def test_registry_lookup(registry: FieldRegistry) -> None:
    assert registry.has("status")
    assert "status" in registry
    assert not registry.has("bogus")
    assert registry.get("bogus") is None
    assert registry.kind_of("is_active") is FieldKind.BOOLEAN
    assert registry.validator_of("author") is None
    assert registry.validator_of("status") is not None


def test_registry_hidden_fields_are_dropped() -> None:
    registry = FieldRegistry(
        {"id": None, "secret": None, "title": None},
        hidden_fields=frozenset({"secret"}),
    )
    assert registry.names == ("id", "title")
    assert not registry.has("secret")


def test_registry_drops_soft_delete_marker() -> None:
    registry = FieldRegistry({"id": None, "deleted_on": None})
    assert registry.names == ("id",)

    custom = FieldRegistry(
        {"id": None, "deleted_on": None, "removed_on": None},
        deleted_marker="removed_on",
    )
    assert custom.names == ("id", "deleted_on")

    unmarked = FieldRegistry({"id": None, "deleted_on": None}, deleted_marker=None)
    assert unmarked.has("deleted_on")


def test_registry_id_and_default_order() -> None:
    newest = SortDirective("created_on", SortDirection.DESC)
    registry = FieldRegistry(
        {"uuid": None, "created_on": None}, id_field="uuid", default_order=(newest,)
    )
    assert registry.id_field == "uuid"
    assert registry.default_order == (newest,)


def test_descriptor_infer() -> None:
    descriptor = FieldDescriptor.infer("published_on")
    assert descriptor == FieldDescriptor("published_on", FieldKind.DATETIME, None)
