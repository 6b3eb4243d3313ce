"""Integration test fixtures for database-backed outbox tests.

These tests run against a temporary SQLite database through aiosqlite,
so they exercise real transactions, commits and rollbacks without an
external database server.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from tenacity import wait_none

from infrastructure.database.engines import create_session_factory
from infrastructure.database.transactions import Transactor
from infrastructure.outbox.publisher import OutboxPublisher
from infrastructure.outbox.table import OutboxTable
from infrastructure.outbox.writer import OutboxWriter
from outboxtest.asserter import OutboxAsserter


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (uses a SQLite database)",
    )


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Provide an engine on a fresh SQLite file with the default outbox table."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'outbox.db'}")
    async with engine.begin() as conn:
        await OutboxTable().create(conn)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
def transactor(session_factory: async_sessionmaker[AsyncSession]) -> Transactor:
    """Transactor that retries without sleeping."""
    return Transactor(session_factory, retry_wait=wait_none())


@pytest.fixture
def writer() -> OutboxWriter:
    return OutboxWriter()


@pytest.fixture
def asserter(transactor: Transactor) -> OutboxAsserter:
    return OutboxAsserter(transactor)


@pytest.fixture
def publisher(transactor: Transactor, writer: OutboxWriter) -> OutboxPublisher:
    """Publisher using the engine's default isolation level.

    SQLite does not accept READ COMMITTED.
    """
    return OutboxPublisher(transactor, writer=writer, isolation_level=None)
