"""Create records table

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  Creates the `records` table backing SqlRecordStore.
How:   One row per document, composite key (collection, id), JSON body.

Rollback: downgrade() drops the table (all items and profiles are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the records table and its collection index (see uphaar/models/record.py)."""
    op.create_table(
        "records",
        sa.Column(
            "collection",
            sa.String(64),
            nullable=False,
            comment="Collection name, e.g. items or users",
        ),
        sa.Column(
            "id",
            sa.String(128),
            nullable=False,
            comment="Document id, unique within its collection",
        ),
        sa.Column(
            "data",
            sa.JSON(),
            nullable=False,
            comment="Document body",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("collection", "id"),
    )

    op.create_index("idx_records_collection", "records", ["collection"])


def downgrade() -> None:
    op.drop_index("idx_records_collection", table_name="records")
    op.drop_table("records")
