"""Unit tests for the outbox table migration.

The revision is applied to an in-memory SQLite database through Alembic's
Operations API, without an alembic.ini or environment script.
"""

import importlib

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

MIGRATION = "infrastructure.migrations.versions.3f9c2a71b8d4_create_outbox_table"


@pytest.fixture
def migration():
    return importlib.import_module(MIGRATION)


@pytest.fixture
def connection():
    engine = create_engine("sqlite://")
    with engine.connect() as conn:
        yield conn
    engine.dispose()


def _run(connection, step) -> None:
    context = MigrationContext.configure(connection)
    with Operations.context(context):
        step()


def test_is_the_first_revision(migration):
    assert migration.down_revision is None


def test_upgrade_creates_outbox_table(migration, connection):
    _run(connection, migration.upgrade)

    inspector = inspect(connection)
    columns = {column["name"]: column for column in inspector.get_columns("outbox")}
    assert set(columns) == {"id", "destination", "headers", "message"}
    assert inspector.get_pk_constraint("outbox")["constrained_columns"] == ["id"]
    assert not columns["destination"].get("nullable")
    indexes = inspector.get_indexes("outbox")
    assert [index["column_names"] for index in indexes] == [["destination"]]


def test_downgrade_drops_outbox_table(migration, connection):
    _run(connection, migration.upgrade)
    _run(connection, migration.downgrade)

    assert "outbox" not in inspect(connection).get_table_names()


def test_revision_id_matches_file_name(migration):
    assert migration.revision == "3f9c2a71b8d4"
