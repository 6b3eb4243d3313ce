"""Outbox pattern building blocks.

Messages are recorded in an outbox table inside the same transaction as
the business writes that produced them; a separate relay publishes them
once that transaction commits.
"""

from shared_kernel.outbox.exceptions import (
    MessageDecodeError,
    MessageSerializationError,
    OutboxError,
)
from shared_kernel.outbox.headers import decode_headers, encode_headers, get_header
from shared_kernel.outbox.ports import Matcher, MessageCodec, OutboxMessage
from shared_kernel.outbox.serialization import PydanticMessageCodec
from shared_kernel.outbox.value_objects import OutboxRow, OutboxTableNames

__all__ = [
    "Matcher",
    "MessageCodec",
    "MessageDecodeError",
    "MessageSerializationError",
    "OutboxError",
    "OutboxMessage",
    "OutboxRow",
    "OutboxTableNames",
    "PydanticMessageCodec",
    "decode_headers",
    "encode_headers",
    "get_header",
]
