"""Batch publisher for the outbox.

Opens its own transaction, appends every message through an OutboxWriter
and commits, for callers that have nothing else to write atomically.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from infrastructure.database.transactions import Transactor, TxOptions
from infrastructure.outbox.writer import OutboxWriter
from shared_kernel.outbox.observability import DefaultOutboxProbe

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from infrastructure.settings import OutboxSettings
    from shared_kernel.outbox.observability import OutboxProbe
    from shared_kernel.outbox.ports import OutboxMessage


class OutboxPublisher:
    """Records a batch of messages in one read-write transaction.

    The batch is all or nothing: if any append fails the transaction rolls
    back and no row from the batch survives. Retryable database errors
    re-run the whole batch.
    """

    def __init__(
        self,
        transactor: Transactor,
        writer: OutboxWriter | None = None,
        isolation_level: str | None = "READ COMMITTED",
        max_attempts: int = 3,
        probe: OutboxProbe | None = None,
    ) -> None:
        """Initialize the publisher.

        Args:
            transactor: Opens the publish transactions
            writer: Writer used for each message (defaults to the "outbox" layout)
            isolation_level: Isolation level of publish transactions
            max_attempts: Attempts when the database reports a retryable error
            probe: Observability probe
        """
        self._transactor = transactor
        self._writer = writer or OutboxWriter()
        self._options = TxOptions(
            isolation_level=isolation_level,
            retryable=True,
            max_attempts=max_attempts,
        )
        self._probe = probe or DefaultOutboxProbe()

    async def publish(self, *messages: OutboxMessage) -> list[str]:
        """Append all messages, in order, in a single committed transaction.

        Args:
            *messages: Messages to record

        Returns:
            Ids of the new rows, in input order
        """

        async def append_all(session: AsyncSession) -> list[str]:
            return [await self._writer.append(session, message) for message in messages]

        message_ids = await self._transactor.transact(append_all, self._options)
        self._probe.batch_published(len(message_ids))
        return message_ids


def create_outbox_publisher(
    session_factory: async_sessionmaker[AsyncSession],
    settings: OutboxSettings | None = None,
) -> OutboxPublisher:
    """Build a publisher from settings.

    Args:
        session_factory: Factory for the sessions publish transactions run in
        settings: Outbox settings (defaults to the cached environment settings)

    Returns:
        A publisher writing to the configured outbox table
    """
    if settings is None:
        from infrastructure.settings import get_outbox_settings

        settings = get_outbox_settings()
    return OutboxPublisher(
        Transactor(session_factory),
        writer=OutboxWriter(names=settings.table_names()),
        isolation_level=settings.publish_isolation_level,
        max_attempts=settings.publish_max_attempts,
    )
