"""create_outbox_table

Create the outbox table for the transactional outbox pattern.
Rows are written in the same transaction as business data and claimed
(deleted) by whichever consumer publishes them.

Revision ID: 3f9c2a71b8d4
Revises:
Create Date: 2026-10-19 09:12:44.530861

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "3f9c2a71b8d4"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "outbox",
        sa.Column("id", sa.String(length=36), nullable=False),  # UUID text
        sa.Column(
            "destination", sa.String(length=255), nullable=False
        ),  # e.g., "orders.created"
        sa.Column(
            "headers", sa.Text(), nullable=False, server_default=""
        ),  # query-string encoded
        sa.Column("message", sa.LargeBinary(), nullable=False),  # serialized payload
        sa.PrimaryKeyConstraint("id"),
    )
    # Consumers look rows up by destination equality
    op.create_index(
        "ix_outbox_destination",
        "outbox",
        ["destination"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_outbox_destination", table_name="outbox")
    op.drop_table("outbox")
