from pytest_archon import archrule


def test_compiler_is_backend_independent() -> None:
    """
    Parsing and compilation must not know about any store.
    Only the persistence subpackages talk to SQLAlchemy or Mongo.
    """
    (
        archrule("compiler_is_backend_independent")
        .match("listing_query*")
        .exclude("listing_query.persistence*")
        .should_not_import("listing_query.persistence*")
        .should_not_import("sqlalchemy*")
        .should_not_import("motor*")
        .should_not_import("pymongo*")
        .check("listing_query")
    )


def test_relational_backend_isolation() -> None:
    """The relational backend does not pull in the search-index stack."""
    (
        archrule("relational_backend_isolation")
        .match("listing_query.persistence.sqla*")
        .should_not_import("listing_query.persistence.mongo*")
        .should_not_import("motor*")
        .should_not_import("pymongo*")
        .check("listing_query.persistence.sqla")
    )


def test_search_index_backend_isolation() -> None:
    """The search-index backend does not pull in SQLAlchemy."""
    (
        archrule("search_index_backend_isolation")
        .match("listing_query.persistence.mongo*")
        .should_not_import("listing_query.persistence.sqla*")
        .should_not_import("sqlalchemy*")
        .check("listing_query.persistence.mongo")
    )
