"""Create merge_directive table.

Revision ID: 0001_create_merge_directive
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_create_merge_directive"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "merge_directive",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("primary_handle", sa.String(), nullable=False),
        sa.Column("secondary_handle", sa.String(), nullable=False),
        sa.Column("pair_key", sa.String(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_merge_directive"),
        sa.UniqueConstraint("secondary_handle", name="uq_merge_directive_secondary_handle"),
        sa.UniqueConstraint("pair_key", name="uq_merge_directive_pair_key"),
    )
    op.create_index(
        "ix_merge_directive_primary_handle",
        "merge_directive",
        ["primary_handle"],
    )


def downgrade() -> None:
    op.drop_index("ix_merge_directive_primary_handle", table_name="merge_directive")
    op.drop_table("merge_directive")
