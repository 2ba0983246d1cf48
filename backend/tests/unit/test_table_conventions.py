"""Test database table conventions.

Verifies that the persisted tables follow the schema conventions:
- UUID primary key named id
- Standard timestamp columns
- Indexes backing listing, sweeps and image lookup
"""

import pytest
from sqlalchemy import inspect

from collabdoc.models import Base

TABLES = ["document", "image"]

REQUIRED_TIMESTAMP_COLUMNS = ["created_at", "updated_at"]

EXPECTED_INDEXES = {
    "document": {"ix_document_owner_external_id", "ix_document_last_accessed_at"},
    "image": {"ix_image_document_id"},
}


@pytest.fixture
def inspector(db_session):
    return inspect(db_session.get_bind())


def test_metadata_tables():
    assert set(Base.metadata.tables) == set(TABLES)


@pytest.mark.parametrize("table", TABLES)
def test_primary_key_is_id(inspector, table):
    assert inspector.get_pk_constraint(table)["constrained_columns"] == ["id"]


@pytest.mark.parametrize("table", TABLES)
def test_timestamp_columns(inspector, table):
    columns = {c["name"]: c for c in inspector.get_columns(table)}
    for name in REQUIRED_TIMESTAMP_COLUMNS:
        assert name in columns
        assert columns[name]["nullable"] is False


@pytest.mark.parametrize("table", TABLES)
def test_indexes(inspector, table):
    names = {ix["name"] for ix in inspector.get_indexes(table)}
    assert EXPECTED_INDEXES[table] <= names


def test_image_references_document(inspector):
    foreign_keys = inspector.get_foreign_keys("image")

    assert len(foreign_keys) == 1
    assert foreign_keys[0]["referred_table"] == "document"
    assert foreign_keys[0]["constrained_columns"] == ["document_id"]


def test_document_secret_is_required(inspector):
    columns = {c["name"]: c for c in inspector.get_columns("document")}
    assert columns["modification_secret"]["nullable"] is False
    assert columns["data"]["nullable"] is True
