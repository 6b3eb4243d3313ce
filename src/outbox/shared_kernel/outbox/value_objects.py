"""Value objects for the outbox pattern.

Value objects are immutable descriptors that provide type safety and
domain semantics for outbox rows and the table that stores them.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared_kernel.outbox.headers import decode_headers, get_header


@dataclass(frozen=True)
class OutboxTableNames:
    """Table and column names of an outbox table.

    Each writer, publisher and asserter is bound to one instance, so
    outbox tables with different naming conventions can coexist in the
    same database.

    Attributes:
        table_name: Name of the outbox table
        id_column: Primary key column holding the row UUID
        destination_column: Column holding the topic/queue name
        headers_column: Column holding query-string encoded headers
        message_column: Column holding the serialized payload
    """

    table_name: str = "outbox"
    id_column: str = "id"
    destination_column: str = "destination"
    headers_column: str = "headers"
    message_column: str = "message"


@dataclass(frozen=True)
class OutboxRow:
    """A single row of the outbox table as read back from the database.

    Attributes:
        id: Unique identifier assigned when the row was written
        destination: Topic or queue the message targets
        headers: Query-string encoded headers, as stored
        message: Serialized payload
    """

    id: str
    destination: str
    headers: str
    message: bytes

    @property
    def decoded_headers(self) -> dict[str, list[str]]:
        """Decode the stored headers.

        Returns:
            Mapping of header name to all stored values
        """
        return decode_headers(self.headers)

    def header(self, key: str) -> str:
        """Return the first stored value for a header, or an empty string."""
        return get_header(self.decoded_headers, key)
