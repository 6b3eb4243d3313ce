"""Observability probes for the outbox test harness."""

from __future__ import annotations

from typing import Protocol

import structlog

logger = structlog.get_logger()


class OutboxAsserterProbe(Protocol):
    """Protocol for outbox test harness observability."""

    def message_popped(self, destination: str, message_id: str) -> None:
        """Called when a row was claimed and deleted."""
        ...

    def pop_failed(self, destination: str, reason: str) -> None:
        """Called when a pop found nothing acceptable; no row was deleted."""
        ...

    def outbox_purged(self, count: int) -> None:
        """Called when every row was deleted."""
        ...


class DefaultOutboxAsserterProbe:
    """Default implementation using structlog."""

    def __init__(self) -> None:
        self._log = logger.bind(component="outbox_asserter")

    def message_popped(self, destination: str, message_id: str) -> None:
        self._log.debug(
            "outbox_message_popped",
            destination=destination,
            message_id=message_id,
        )

    def pop_failed(self, destination: str, reason: str) -> None:
        self._log.info("outbox_pop_failed", destination=destination, reason=reason)

    def outbox_purged(self, count: int) -> None:
        self._log.debug("outbox_purged", count=count)
