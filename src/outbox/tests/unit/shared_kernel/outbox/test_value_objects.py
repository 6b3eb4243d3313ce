"""Unit tests for outbox value objects."""

from dataclasses import FrozenInstanceError

import pytest

from shared_kernel.outbox.value_objects import OutboxRow, OutboxTableNames


class TestOutboxTableNames:
    """Tests for OutboxTableNames."""

    def test_defaults(self):
        names = OutboxTableNames()

        assert names.table_name == "outbox"
        assert names.id_column == "id"
        assert names.destination_column == "destination"
        assert names.headers_column == "headers"
        assert names.message_column == "message"

    def test_is_immutable(self):
        names = OutboxTableNames()

        with pytest.raises(FrozenInstanceError):
            names.table_name = "other"  # type: ignore[misc]


class TestOutboxRow:
    """Tests for OutboxRow."""

    def test_decoded_headers(self):
        row = OutboxRow(
            id="1",
            destination="orders.created",
            headers="grpc-service=orders&tag=a&tag=b",
            message=b"{}",
        )

        assert row.decoded_headers == {"grpc-service": ["orders"], "tag": ["a", "b"]}

    def test_header_returns_first_value(self):
        row = OutboxRow(id="1", destination="d", headers="tag=a&tag=b", message=b"")

        assert row.header("tag") == "a"

    def test_header_missing_returns_empty_string(self):
        row = OutboxRow(id="1", destination="d", headers="", message=b"")

        assert row.header("grpc-service") == ""
