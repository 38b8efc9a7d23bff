"""Initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-11-01 00:00:00
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "participants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("name_key", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_participants_name_key", "participants", ["name_key"], unique=True)

    op.create_table(
        "pairings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("giver_name", sa.String(), nullable=False),
        sa.Column("giver_key", sa.String(), nullable=False),
        sa.Column("recipient_name", sa.String(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("giver_key", "position", name="uq_pairings_giver_position"),
    )
    op.create_index("ix_pairings_giver_key", "pairings", ["giver_key"])


def downgrade() -> None:
    op.drop_index("ix_pairings_giver_key", table_name="pairings")
    op.drop_table("pairings")
    op.drop_index("ix_participants_name_key", table_name="participants")
    op.drop_table("participants")
