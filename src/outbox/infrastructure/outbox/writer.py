"""Outbox writer implementation.

This module appends messages to the outbox table inside the caller's
transaction. It handles serialization, header encoding and id
generation; it never commits.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import insert

from infrastructure.outbox.table import OutboxTable
from shared_kernel.outbox.exceptions import MessageSerializationError
from shared_kernel.outbox.headers import encode_headers
from shared_kernel.outbox.observability import DefaultOutboxProbe
from shared_kernel.outbox.serialization import PydanticMessageCodec

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from infrastructure.settings import OutboxSettings
    from shared_kernel.outbox.observability import OutboxProbe
    from shared_kernel.outbox.ports import MessageCodec, OutboxMessage
    from shared_kernel.outbox.value_objects import OutboxTableNames


def _new_message_id() -> str:
    return str(uuid4())


class OutboxWriter:
    """Appends messages to an outbox table.

    The writer shares the database session of the calling code, so the
    outbox row is committed or rolled back together with the business
    writes in the same transaction. It only calls session.execute() -
    the caller owns the transaction boundary.
    """

    def __init__(
        self,
        names: OutboxTableNames | None = None,
        codec: MessageCodec | None = None,
        probe: OutboxProbe | None = None,
        id_factory: Callable[[], str] = _new_message_id,
    ) -> None:
        """Initialize the writer.

        Args:
            names: Table and column names (defaults to the "outbox" layout)
            codec: Payload codec (defaults to pydantic JSON)
            probe: Observability probe
            id_factory: Generates the id of each new row
        """
        self._table = OutboxTable(names)
        self._codec = codec or PydanticMessageCodec()
        self._probe = probe or DefaultOutboxProbe()
        self._id_factory = id_factory

    @property
    def table(self) -> OutboxTable:
        """The outbox table this writer inserts into."""
        return self._table

    async def append(self, session: AsyncSession, message: OutboxMessage) -> str:
        """Append a message to the outbox within the caller's transaction.

        Exactly one INSERT is issued. Nothing is written if the payload
        fails to serialize; database errors propagate unchanged so the
        caller's transaction can roll back.

        Args:
            session: Session with the caller's open transaction
            message: The message to record

        Returns:
            The id of the new outbox row

        Raises:
            MessageSerializationError: If the payload cannot be serialized
        """
        destination = message.messaging_topic()
        try:
            data = self._codec.encode(message)
        except MessageSerializationError as e:
            self._probe.message_serialization_failed(destination, str(e))
            raise

        headers = encode_headers(message.messaging_headers())
        message_id = self._id_factory()

        stmt = insert(self._table.table).values(
            {
                self._table.id: message_id,
                self._table.destination: destination,
                self._table.headers: headers,
                self._table.message: data,
            }
        )
        await session.execute(stmt)

        self._probe.message_appended(message_id, destination)
        return message_id


def create_outbox_writer(settings: OutboxSettings | None = None) -> OutboxWriter:
    """Build a writer bound to the configured table layout.

    Args:
        settings: Outbox settings (defaults to the cached environment settings)

    Returns:
        A writer for the configured outbox table
    """
    if settings is None:
        from infrastructure.settings import get_outbox_settings

        settings = get_outbox_settings()
    return OutboxWriter(names=settings.table_names())
