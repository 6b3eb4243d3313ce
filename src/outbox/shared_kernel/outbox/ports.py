"""Protocols (ports) for the outbox pattern.

These protocols describe what the outbox needs from the outside world:
messages that know their destination and headers, a codec that turns a
payload into bytes and back, and matchers used by the test harness to
pick a stored message out of a destination.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class OutboxMessage(Protocol):
    """A message that can be recorded in the outbox.

    The payload itself is whatever the configured ``MessageCodec`` accepts;
    the message only has to say where it goes and which headers travel
    with it.
    """

    def messaging_topic(self) -> str:
        """Return the logical topic or queue this message targets."""
        ...

    def messaging_headers(self) -> Mapping[str, str]:
        """Return the headers to store alongside the payload.

        One value per key. Repeated keys are a storage-level affordance
        that this API does not produce.
        """
        ...


@runtime_checkable
class MessageCodec(Protocol):
    """Serializes outbox payloads to bytes and decodes them back in place.

    Decoding mutates the supplied target rather than returning a new
    object, so callers can hand the harness an "expected shape" and read
    the stored values from it afterwards.
    """

    def encode(self, message: Any) -> bytes:
        """Serialize a message payload.

        Raises:
            MessageSerializationError: If the payload cannot be encoded
        """
        ...

    def decode_into(self, data: bytes, target: Any) -> None:
        """Populate ``target`` from serialized bytes.

        Raises:
            MessageDecodeError: If the bytes do not decode into the target type
        """
        ...


@runtime_checkable
class Matcher(Protocol):
    """Decides whether a stored outbox row is the one a test is looking for."""

    def messaging_topic(self) -> str:
        """Return the destination whose rows should be considered."""
        ...

    def attempt(self, service_name: str, data: bytes) -> bool:
        """Try to accept a candidate row.

        Args:
            service_name: The service header value stored on the row
            data: The raw serialized payload

        Returns:
            True if the row is accepted, False to move on to the next row

        Raises:
            MessageDecodeError: If the payload cannot be decoded
        """
        ...
