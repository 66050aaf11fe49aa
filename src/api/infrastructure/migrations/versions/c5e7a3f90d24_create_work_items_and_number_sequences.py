"""create work items and number sequences tables

Revision ID: c5e7a3f90d24
Revises: 8b42d0e6c1a5
Create Date: 2026-10-13 14:02:19.004871

work_item_number_sequences holds one row per space with the last number
handed out. The (space_id, number) unique constraint on work_items backs up
the allocator: a duplicate number can never be stored.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "c5e7a3f90d24"
down_revision: Union[str, Sequence[str], None] = "8b42d0e6c1a5"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create work_items and work_item_number_sequences tables."""
    op.create_table(
        "work_item_number_sequences",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("space_id", sa.Uuid(), nullable=False),
        sa.Column("current_val", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint(
            "space_id", name="uq_work_item_number_sequences_space_id"
        ),
        sa.CheckConstraint(
            "current_val >= 0", name="ck_work_item_number_sequences_non_negative"
        ),
    )

    op.create_table(
        "work_items",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "space_id",
            sa.Uuid(),
            sa.ForeignKey("spaces.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column(
            "description",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("space_id", "number", name="uq_work_items_space_number"),
    )
    op.create_index("ix_work_items_space_id", "work_items", ["space_id"])


def downgrade() -> None:
    """Drop work_items and work_item_number_sequences tables."""
    op.drop_index("ix_work_items_space_id", table_name="work_items")
    op.drop_table("work_items")
    op.drop_table("work_item_number_sequences")
