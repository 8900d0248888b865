"""Push subscriptions and deduplicated user agents.

Revision ID: 002_push_subscriptions
Revises: 001_directory_schema
Create Date: 2026-10-18

The endpoint unique constraint makes concurrent first submissions of the same
endpoint collapse to one row; the registrar re-reads after a violation.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002_push_subscriptions"
down_revision: Union[str, None] = "001_directory_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "user_agents",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_agent", sa.Text, nullable=False, unique=True),
    )
    op.create_table(
        "push_subscriptions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "account_id", sa.Integer,
            sa.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("endpoint", sa.Text, nullable=False, unique=True),
        sa.Column("expiration_time", sa.BigInteger, nullable=True),
        sa.Column("p256dh", sa.String(255), nullable=False),
        sa.Column("auth", sa.String(255), nullable=False),
        sa.Column("user_agent_id", sa.Integer, sa.ForeignKey("user_agents.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_push_subscriptions_account_id", "push_subscriptions", ["account_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_push_subscriptions_account_id", table_name="push_subscriptions")
    op.drop_table("push_subscriptions")
    op.drop_table("user_agents")
