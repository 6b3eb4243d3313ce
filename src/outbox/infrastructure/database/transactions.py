"""Transaction runner for async SQLAlchemy sessions.

A Transactor opens a fresh session, runs a unit of work inside one
transaction and commits it, or rolls it back and re-raises. Work marked
retryable is re-run from scratch when the database reports a
serialization failure, a deadlock or a dropped connection.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from infrastructure.observability.probes import DefaultTransactionProbe

if TYPE_CHECKING:
    from tenacity.wait import wait_base

    from infrastructure.observability.probes import TransactionProbe

T = TypeVar("T")

# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


def is_retryable_error(error: BaseException) -> bool:
    """Return True if re-running the whole transaction may succeed."""
    if not isinstance(error, DBAPIError):
        return False
    if error.connection_invalidated:
        return True
    code = getattr(error.orig, "sqlstate", None) or getattr(error.orig, "pgcode", None)
    return code in RETRYABLE_SQLSTATES


@dataclass(frozen=True)
class TxOptions:
    """Options for a single transaction.

    Attributes:
        isolation_level: Isolation level pinned for this transaction only
            (e.g., "READ COMMITTED", "SERIALIZABLE"); None keeps the
            engine default
        retryable: Re-run the unit of work on retryable database errors
        max_attempts: Total attempts when retryable
    """

    isolation_level: str | None = None
    retryable: bool = False
    max_attempts: int = 3


class Transactor:
    """Runs units of work inside fresh transactions.

    The unit of work receives the session and must not commit or roll back
    itself; the Transactor owns the transaction boundary.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        probe: TransactionProbe | None = None,
        retry_wait: wait_base | None = None,
    ) -> None:
        """Initialize the transactor.

        Args:
            session_factory: Factory for creating database sessions
            probe: Observability probe for retries and failures
            retry_wait: Wait strategy between retryable attempts
        """
        self._session_factory = session_factory
        self._probe = probe or DefaultTransactionProbe()
        self._retry_wait = retry_wait or wait_exponential(multiplier=0.05, max=1)

    async def transact(
        self,
        work: Callable[[AsyncSession], Awaitable[T]],
        options: TxOptions | None = None,
    ) -> T:
        """Run ``work`` in a new transaction and commit it.

        Args:
            work: Coroutine function receiving the transaction's session
            options: Isolation and retry options

        Returns:
            Whatever ``work`` returned

        Raises:
            Exception: Anything ``work`` or the database raised, after the
                transaction was rolled back
        """
        options = options or TxOptions()
        if not options.retryable:
            return await self._run_once(work, options)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(options.max_attempts),
            wait=self._retry_wait,
            retry=retry_if_exception(is_retryable_error),
            before_sleep=self._before_retry,
            reraise=True,
        )
        return await retrying(self._run_once, work, options)

    async def _run_once(
        self,
        work: Callable[[AsyncSession], Awaitable[T]],
        options: TxOptions,
    ) -> T:
        async with self._session_factory() as session:
            try:
                async with session.begin():
                    if options.isolation_level is not None:
                        # Must be the first statement of the transaction
                        await session.connection(
                            execution_options={
                                "isolation_level": options.isolation_level
                            }
                        )
                    return await work(session)
            except Exception as e:
                self._probe.transaction_failed(e)
                raise

    def _before_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        if error is not None:
            self._probe.transaction_retrying(retry_state.attempt_number, error)
