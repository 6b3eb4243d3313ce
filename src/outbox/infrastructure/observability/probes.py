"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class TransactionProbe(Protocol):
    """Domain probe for database transaction observability."""

    def transaction_retrying(self, attempt: int, error: BaseException) -> None:
        """Record that a retryable transaction failed and will run again."""
        ...

    def transaction_failed(self, error: BaseException) -> None:
        """Record that a transaction rolled back and its error propagated."""
        ...


class DefaultTransactionProbe:
    """Default implementation of TransactionProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def transaction_retrying(self, attempt: int, error: BaseException) -> None:
        """Record that a retryable transaction failed and will run again."""
        self._logger.warning(
            "database_transaction_retrying",
            attempt=attempt,
            error=str(error),
        )

    def transaction_failed(self, error: BaseException) -> None:
        """Record that a transaction rolled back and its error propagated."""
        self._logger.debug(
            "database_transaction_failed",
            error_type=type(error).__name__,
            error=str(error),
        )
