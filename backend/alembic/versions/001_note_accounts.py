"""Initial schema — note_accounts.

Revision ID: 001_note_accounts
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_note_accounts"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "note_accounts",
        sa.Column("address", sa.String(64), primary_key=True),
        sa.Column("payer", sa.String(64), nullable=False),
        sa.Column("capacity", sa.Integer, nullable=False),
        sa.Column("data", sa.LargeBinary, nullable=False),
        sa.Column("allocated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_note_accounts_payer", "note_accounts", ["payer"])


def downgrade() -> None:
    op.drop_index("ix_note_accounts_payer", table_name="note_accounts")
    op.drop_table("note_accounts")
