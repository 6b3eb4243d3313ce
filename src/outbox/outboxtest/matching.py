"""Predicate matchers for popping outbox messages.

A MessageMatch decodes each candidate row into its own message instance
and accepts the first one for which every condition holds.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

from shared_kernel.outbox.ports import MessageCodec, OutboxMessage
from shared_kernel.outbox.serialization import PydanticMessageCodec

M = TypeVar("M", bound=OutboxMessage)

DEFAULT_SERVICE_NAME_HEADER = "grpc-service"


class MessageMatch(Generic[M]):
    """Matcher for one message type with optional conditions.

    Implements the Matcher protocol. After a successful pop, ``message``
    holds the values of the accepted row.

    Example:
        match = MessageMatch(OrderCreated(), lambda m: m.order_id == "o-1")
        await asserter.pop_matching(match)
        assert match.message.amount == 30
    """

    def __init__(
        self,
        message: M,
        *conditions: Callable[[M], bool],
        service_name_header: str | None = None,
        codec: MessageCodec | None = None,
    ) -> None:
        """Initialize the matcher.

        Args:
            message: Instance of the expected type; decoded into in place
            *conditions: Predicates that must all hold for a row to match
            service_name_header: Header whose value must equal the message's own;
                when omitted, the popping asserter's header is used
            codec: Payload codec (defaults to pydantic JSON)
        """
        self.message = message
        self._conditions = conditions
        self._service_name_header = service_name_header
        self._default_service_name_header = DEFAULT_SERVICE_NAME_HEADER
        self._codec = codec or PydanticMessageCodec()

    @property
    def service_name_header(self) -> str:
        """Header compared against the message's own service name."""
        return self._service_name_header or self._default_service_name_header

    def use_default_service_name_header(self, header: str) -> None:
        """Set the header used when none was given at construction."""
        self._default_service_name_header = header

    def messaging_topic(self) -> str:
        """Return the destination of the expected message."""
        return self.message.messaging_topic()

    def attempt(self, service_name: str, data: bytes) -> bool:
        """Decode a candidate row and evaluate the conditions.

        Args:
            service_name: Service header stored on the row
            data: Serialized payload of the row

        Returns:
            True if the row belongs to the expected service and every
            condition holds

        Raises:
            MessageDecodeError: If the payload does not decode into the message type
        """
        expected = self.message.messaging_headers().get(self.service_name_header, "")
        if service_name != expected:
            return False

        self._codec.decode_into(data, self.message)

        return all(condition(self.message) for condition in self._conditions)
