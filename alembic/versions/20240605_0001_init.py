"""Users and interval presets

Revision ID: 20240605_0001_init
Revises: 
Create Date: 2024-06-05 00:01:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20240605_0001_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("telegram_id", sa.Integer(), nullable=False),
        sa.Column("last_rounds", sa.Integer(), nullable=True),
        sa.Column("last_work_seconds", sa.Integer(), nullable=True),
        sa.Column("last_rest_seconds", sa.Integer(), nullable=True),
        sa.UniqueConstraint("telegram_id", name="uq_users_telegram"),
    )
    op.create_index("ix_users_telegram_id", "users", ["telegram_id"], unique=True)

    op.create_table(
        "interval_presets",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("rounds", sa.Integer(), nullable=False),
        sa.Column("work_seconds", sa.Integer(), nullable=False),
        sa.Column("rest_seconds", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "name", name="uq_preset_user_name"),
    )
    op.create_index("ix_interval_presets_user", "interval_presets", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_interval_presets_user", table_name="interval_presets")
    op.drop_table("interval_presets")
    op.drop_index("ix_users_telegram_id", table_name="users")
    op.drop_table("users")
