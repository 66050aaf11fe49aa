"""create comments table

Revision ID: e91f4b2a7c63
Revises: c5e7a3f90d24
Create Date: 2026-10-14 10:45:33.271609

parent_id is free text rather than a foreign key: comments may hang off any
kind of entity.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "e91f4b2a7c63"
down_revision: Union[str, Sequence[str], None] = "c5e7a3f90d24"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create comments table with an index for listing by parent."""
    op.create_table(
        "comments",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("parent_id", sa.Text(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False, server_default=""),
        sa.Column("markup", sa.Text(), nullable=False),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_comments_parent_id", "comments", ["parent_id"])


def downgrade() -> None:
    """Drop comments table."""
    op.drop_index("ix_comments_parent_id", table_name="comments")
    op.drop_table("comments")
