"""SQLAlchemy table definition for the outbox.

Table and column names are configuration, so the table is built with
SQLAlchemy Core from an OutboxTableNames value object instead of being a
fixed declarative model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Column, LargeBinary, MetaData, String, Table, Text

from shared_kernel.outbox.value_objects import OutboxTableNames

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncConnection


class OutboxTable:
    """Core table for one outbox naming scheme.

    Each instance owns its own MetaData unless one is supplied, so
    differently named outbox tables never collide.
    """

    def __init__(
        self,
        names: OutboxTableNames | None = None,
        metadata: MetaData | None = None,
    ) -> None:
        self.names = names or OutboxTableNames()
        self.table = Table(
            self.names.table_name,
            metadata if metadata is not None else MetaData(),
            Column(self.names.id_column, String(36), primary_key=True),
            Column(
                self.names.destination_column,
                String(255),
                nullable=False,
                index=True,
            ),
            Column(self.names.headers_column, Text, nullable=False, default=""),
            Column(self.names.message_column, LargeBinary, nullable=False),
        )

    @property
    def id(self) -> Column:
        """Primary key column."""
        return self.table.c[self.names.id_column]

    @property
    def destination(self) -> Column:
        """Destination (topic) column."""
        return self.table.c[self.names.destination_column]

    @property
    def headers(self) -> Column:
        """Encoded headers column."""
        return self.table.c[self.names.headers_column]

    @property
    def message(self) -> Column:
        """Serialized payload column."""
        return self.table.c[self.names.message_column]

    async def create(self, connection: AsyncConnection) -> None:
        """Create the table (and its destination index) if it does not exist."""
        await connection.run_sync(self.table.create, checkfirst=True)

    async def drop(self, connection: AsyncConnection) -> None:
        """Drop the table if it exists."""
        await connection.run_sync(self.table.drop, checkfirst=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<OutboxTable(table_name={self.names.table_name})>"
