"""Exceptions raised by the outbox codec and writer.

Storage failures are not wrapped: SQLAlchemy exceptions reach the caller
unchanged so the enclosing transaction can roll back.
"""


class OutboxError(Exception):
    """Base exception for outbox operations."""

    pass


class MessageSerializationError(OutboxError):
    """Raised when a message payload cannot be serialized.

    No row is written for a message that fails to serialize.
    """

    def __init__(self, message_type: str, reason: str):
        super().__init__(f"cannot serialize {message_type}: {reason}")
        self.message_type = message_type
        self.reason = reason


class MessageDecodeError(OutboxError):
    """Raised when stored bytes cannot be decoded into the requested type."""

    def __init__(self, message_type: str, reason: str):
        super().__init__(f"cannot decode stored payload as {message_type}: {reason}")
        self.message_type = message_type
        self.reason = reason
