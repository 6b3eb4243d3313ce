"""Assertion failures raised by the outbox test harness.

All of them subclass AssertionError so pytest reports them as ordinary
test failures. Database errors are not wrapped and reach the test as-is.
"""

from __future__ import annotations

from collections.abc import Mapping


class OutboxAssertionError(AssertionError):
    """Base class for outbox assertion failures."""

    pass


class NoMessageFoundError(OutboxAssertionError):
    """Raised when a destination holds no message to pop."""

    def __init__(self, destination: str, message_type: str):
        super().__init__(
            f"assertion failed, no outbox messages on {destination} for {message_type}"
        )
        self.destination = destination
        self.message_type = message_type


class ServiceHeaderMismatchError(OutboxAssertionError):
    """Raised when the popped row was produced by a different service.

    The row is left in the outbox.
    """

    def __init__(self, destination: str, header: str, expected: str, actual: str):
        super().__init__(
            f"service name header ({header}) on {destination} "
            f"should be {expected!r} but was {actual!r}"
        )
        self.destination = destination
        self.header = header
        self.expected = expected
        self.actual = actual


class NoMatchingMessageError(OutboxAssertionError):
    """Raised when no row on a destination satisfies a matcher."""

    def __init__(self, destination: str, candidates: int):
        super().__init__(
            f"no messages matched for {destination} with custom matcher "
            f"({candidates} candidates)"
        )
        self.destination = destination
        self.candidates = candidates


class UnexpectedMessagesError(OutboxAssertionError):
    """Raised when the outbox, or one of its topics, should be empty but is not."""

    def __init__(self, counts: Mapping[str, int]):
        found = ", ".join(
            f"{count} messages in {destination}"
            for destination, count in sorted(counts.items())
        )
        super().__init__(f"No messages expected, but found: {found}")
        self.counts = dict(counts)
