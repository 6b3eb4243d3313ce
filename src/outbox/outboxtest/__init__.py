"""Test harness for code that writes to the outbox.

Lets tests pop, match, enumerate and purge outbox rows directly from the
database instead of running a relay and a broker.
"""

from outboxtest.asserter import OutboxAsserter
from outboxtest.exceptions import (
    NoMatchingMessageError,
    NoMessageFoundError,
    OutboxAssertionError,
    ServiceHeaderMismatchError,
    UnexpectedMessagesError,
)
from outboxtest.matching import MessageMatch

__all__ = [
    "MessageMatch",
    "NoMatchingMessageError",
    "NoMessageFoundError",
    "OutboxAsserter",
    "OutboxAssertionError",
    "ServiceHeaderMismatchError",
    "UnexpectedMessagesError",
]
