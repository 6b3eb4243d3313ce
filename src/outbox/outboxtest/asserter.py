"""Outbox assertions for automated tests.

The asserter reads the outbox table directly, without a broker, so tests
can check which messages the code under test recorded. Pops claim a row
atomically: the match, the decode and the delete commit together or not
at all.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy import delete, func, select

from infrastructure.database.transactions import Transactor
from infrastructure.outbox.table import OutboxTable
from outboxtest.exceptions import (
    NoMatchingMessageError,
    NoMessageFoundError,
    OutboxAssertionError,
    ServiceHeaderMismatchError,
    UnexpectedMessagesError,
)
from outboxtest.matching import DEFAULT_SERVICE_NAME_HEADER, MessageMatch
from outboxtest.observability import DefaultOutboxAsserterProbe
from shared_kernel.outbox.headers import decode_headers, get_header
from shared_kernel.outbox.serialization import PydanticMessageCodec
from shared_kernel.outbox.value_objects import OutboxRow

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from infrastructure.settings import OutboxSettings
    from outboxtest.observability import OutboxAsserterProbe
    from shared_kernel.outbox.ports import Matcher, MessageCodec, OutboxMessage
    from shared_kernel.outbox.value_objects import OutboxTableNames

M = TypeVar("M", bound="OutboxMessage")

MessageCallback = Callable[[str, str, bytes], Awaitable[None] | None]


class OutboxAsserter:
    """Pops, enumerates and purges outbox rows for test assertions.

    Every operation runs in its own fresh transaction. Assertion failures
    raise OutboxAssertionError subclasses; database errors propagate
    unchanged.
    """

    def __init__(
        self,
        transactor: Transactor,
        names: OutboxTableNames | None = None,
        service_name_header: str = DEFAULT_SERVICE_NAME_HEADER,
        codec: MessageCodec | None = None,
        probe: OutboxAsserterProbe | None = None,
    ) -> None:
        """Initialize the asserter.

        Args:
            transactor: Opens the transactions the assertions run in
            names: Table and column names (defaults to the "outbox" layout)
            service_name_header: Header compared by pop_message and passed to matchers
            codec: Payload codec (defaults to pydantic JSON)
            probe: Observability probe
        """
        self._transactor = transactor
        self._table = OutboxTable(names)
        self._service_name_header = service_name_header
        self._codec = codec or PydanticMessageCodec()
        self._probe = probe or DefaultOutboxAsserterProbe()

    @classmethod
    def from_session_factory(
        cls,
        session_factory: async_sessionmaker[AsyncSession],
        settings: OutboxSettings | None = None,
    ) -> OutboxAsserter:
        """Build an asserter from a session factory and outbox settings."""
        if settings is None:
            from infrastructure.settings import get_outbox_settings

            settings = get_outbox_settings()
        return cls(
            Transactor(session_factory),
            names=settings.table_names(),
            service_name_header=settings.service_name_header,
        )

    async def pop_message(self, message: OutboxMessage) -> str:
        """Pop one message from the message's destination into ``message``.

        One arbitrary row on the destination is selected. Its service
        header must equal the one ``message`` declares; the payload is then
        decoded into ``message`` and the row deleted.

        Args:
            message: Expected-message instance; receives the stored values

        Returns:
            The id of the popped row

        Raises:
            NoMessageFoundError: If the destination holds no rows
            ServiceHeaderMismatchError: If the row came from another service;
                the row is kept
            MessageDecodeError: If the payload does not decode into the message type
        """
        __tracebackhide__ = True
        destination = message.messaging_topic()
        table = self._table

        async def pop(session: AsyncSession) -> str:
            result = await session.execute(
                select(table.id, table.headers, table.message)
                .where(table.destination == destination)
                .limit(1)
            )
            row = result.first()
            if row is None:
                raise NoMessageFoundError(destination, type(message).__name__)

            message_id, raw_headers, data = row
            stored = get_header(decode_headers(raw_headers), self._service_name_header)
            expected = message.messaging_headers().get(self._service_name_header, "")
            if expected != stored:
                raise ServiceHeaderMismatchError(
                    destination, self._service_name_header, expected, stored
                )

            self._codec.decode_into(data, message)

            await session.execute(delete(table.table).where(table.id == message_id))
            return message_id

        return await self._claim(destination, pop)

    def matcher(self, message: M, *conditions: Callable[[M], bool]) -> MessageMatch[M]:
        """Build a MessageMatch using this asserter's service header and codec."""
        return MessageMatch(
            message,
            *conditions,
            service_name_header=self._service_name_header,
            codec=self._codec,
        )

    async def pop_matching(self, matcher: Matcher) -> str:
        """Pop the first row on the matcher's destination that it accepts.

        All rows of the destination are read up front, then offered to the
        matcher in read order. Only the first accepted row is deleted.
        A MessageMatch built without an explicit service header compares
        the header this asserter is configured with.

        Args:
            matcher: Decides which row to accept

        Returns:
            The id of the popped row

        Raises:
            NoMatchingMessageError: If no row was accepted
            MessageDecodeError: If a candidate's payload could not be decoded;
                nothing is deleted
        """
        __tracebackhide__ = True
        if isinstance(matcher, MessageMatch):
            matcher.use_default_service_name_header(self._service_name_header)
        destination = matcher.messaging_topic()
        table = self._table

        async def pop(session: AsyncSession) -> str:
            result = await session.execute(
                select(table.id, table.headers, table.message).where(
                    table.destination == destination
                )
            )
            candidates = result.all()

            for message_id, raw_headers, data in candidates:
                stored = get_header(
                    decode_headers(raw_headers), self._service_name_header
                )
                if matcher.attempt(stored, bytes(data)):
                    await session.execute(
                        delete(table.table).where(table.id == message_id)
                    )
                    return message_id

            raise NoMatchingMessageError(destination, len(candidates))

        return await self._claim(destination, pop)

    async def list_messages(self) -> list[OutboxRow]:
        """Read every row of the outbox without deleting anything."""
        table = self._table

        async def read(session: AsyncSession) -> list[OutboxRow]:
            result = await session.execute(
                select(table.id, table.destination, table.headers, table.message)
            )
            return [
                OutboxRow(
                    id=message_id,
                    destination=destination,
                    headers=raw_headers or "",
                    message=bytes(data),
                )
                for message_id, destination, raw_headers, data in result.all()
            ]

        return await self._transactor.transact(read)

    async def for_each_message(self, callback: MessageCallback) -> None:
        """Invoke ``callback(destination, service_header, payload)`` for every row.

        Rows are read in one transaction; the callback runs after it has
        closed. Coroutine callbacks are awaited. Nothing is deleted.
        """
        for row in await self.list_messages():
            outcome = callback(
                row.destination, row.header(self._service_name_header), row.message
            )
            if inspect.isawaitable(outcome):
                await outcome

    async def assert_no_messages(self) -> None:
        """Fail if any destination holds rows.

        Raises:
            UnexpectedMessagesError: Listing the row count of every non-empty destination
        """
        __tracebackhide__ = True
        table = self._table

        async def count(session: AsyncSession) -> dict[str, int]:
            result = await session.execute(
                select(table.destination, func.count())
                .group_by(table.destination)
                .having(func.count() > 0)
            )
            return {destination: total for destination, total in result.all()}

        counts = await self._transactor.transact(count)
        if counts:
            raise UnexpectedMessagesError(counts)

    async def assert_topic_is_empty(self, topic: str) -> None:
        """Fail if ``topic`` holds rows.

        Raises:
            UnexpectedMessagesError: With the row count of the topic
        """
        __tracebackhide__ = True
        table = self._table

        async def count(session: AsyncSession) -> int:
            result = await session.execute(
                select(func.count())
                .select_from(table.table)
                .where(table.destination == topic)
            )
            return result.scalar_one()

        total = await self._transactor.transact(count)
        if total != 0:
            raise UnexpectedMessagesError({topic: total})

    async def purge_all(self) -> int:
        """Delete every row of the outbox.

        Meant for isolating test cases from each other.

        Returns:
            Number of rows deleted
        """
        table = self._table

        async def purge(session: AsyncSession) -> int:
            result = await session.execute(delete(table.table))
            return result.rowcount

        deleted = await self._transactor.transact(purge)
        self._probe.outbox_purged(deleted)
        return deleted

    async def _claim(
        self,
        destination: str,
        pop: Callable[[AsyncSession], Awaitable[Any]],
    ) -> str:
        __tracebackhide__ = True
        try:
            message_id = await self._transactor.transact(pop)
        except OutboxAssertionError as e:
            self._probe.pop_failed(destination, str(e))
            raise
        self._probe.message_popped(destination, message_id)
        return message_id
