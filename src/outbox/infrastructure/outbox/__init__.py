"""Infrastructure layer for the outbox pattern.

Contains the SQLAlchemy table definition, the writer that appends rows
inside the caller's transaction, and the batch publisher.
"""

from infrastructure.outbox.publisher import OutboxPublisher, create_outbox_publisher
from infrastructure.outbox.table import OutboxTable
from infrastructure.outbox.writer import OutboxWriter, create_outbox_writer

__all__ = [
    "OutboxPublisher",
    "OutboxTable",
    "OutboxWriter",
    "create_outbox_publisher",
    "create_outbox_writer",
]
