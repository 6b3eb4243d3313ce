"""Observability probes for the outbox writer and publisher.

Following Domain Oriented Observability, probes capture domain-significant
events without cluttering the write path with logging concerns.
"""

from __future__ import annotations

from typing import Protocol

import structlog

logger = structlog.get_logger()


class OutboxProbe(Protocol):
    """Protocol for outbox write-path observability.

    Implementations can log, emit metrics, or send traces.
    """

    def message_appended(self, message_id: str, destination: str) -> None:
        """Called when a row has been inserted in the caller's transaction."""
        ...

    def message_serialization_failed(self, destination: str, error: str) -> None:
        """Called when a payload could not be serialized and nothing was written."""
        ...

    def batch_published(self, count: int) -> None:
        """Called when a publish transaction committed."""
        ...


class DefaultOutboxProbe:
    """Default implementation using structlog."""

    def __init__(self) -> None:
        """Initialize the probe with a logger."""
        self._log = logger.bind(component="outbox")

    def message_appended(self, message_id: str, destination: str) -> None:
        """Log an appended row.

        The row is not visible to anyone else until the caller commits.
        """
        self._log.debug(
            "outbox_message_appended",
            message_id=message_id,
            destination=destination,
        )

    def message_serialization_failed(self, destination: str, error: str) -> None:
        """Log a payload that could not be serialized."""
        self._log.warning(
            "outbox_message_serialization_failed",
            destination=destination,
            error=error,
        )

    def batch_published(self, count: int) -> None:
        """Log a committed publish batch."""
        self._log.info("outbox_batch_published", count=count)
