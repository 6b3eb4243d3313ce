"""Database infrastructure - engine and transaction primitives."""

from infrastructure.database.engines import (
    build_async_url,
    create_session_factory,
    create_write_engine,
)
from infrastructure.database.transactions import (
    Transactor,
    TxOptions,
    is_retryable_error,
)

__all__ = [
    "Transactor",
    "TxOptions",
    "build_async_url",
    "create_session_factory",
    "create_write_engine",
    "is_retryable_error",
]
