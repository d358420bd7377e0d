"""Initial schema: trades, trading_plans.

Revision ID: 001_initial
Revises: None
Create Date: 2025-01-01 00:00:00.000000
"""
from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Trades table
    op.create_table(
        "trades",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("entry_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("exit_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("risk_percent_used", sa.Float, nullable=False),
        sa.Column("profit_loss", sa.Float, nullable=False),
        sa.Column("risk_reward_achieved", sa.Float, nullable=False),
        sa.Column("session", sa.String(8), nullable=False),
        sa.Column("stop_loss_hit", sa.Boolean, nullable=False),
        sa.Column("exited_early", sa.Boolean, nullable=False),
        sa.Column("target_percent_achieved", sa.Float, nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_trades_user_entry", "trades", ["user_id", sa.text("entry_time DESC")])
    op.create_index("ix_trades_session_entry", "trades", ["session", sa.text("entry_time DESC")])
    op.create_index("ix_trades_entry_time", "trades", ["entry_time"])

    # Trading plans table
    op.create_table(
        "trading_plans",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False, unique=True),
        sa.Column("max_trades_per_day", sa.Integer, nullable=False),
        sa.Column("risk_percent_per_trade", sa.Float, nullable=False),
        sa.Column("target_risk_reward_ratio", sa.Float, nullable=False),
        sa.Column("preferred_sessions", sa.JSON, nullable=False),
        sa.Column("stop_loss_discipline", sa.String(16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("trading_plans")
    op.drop_index("ix_trades_entry_time", table_name="trades")
    op.drop_index("ix_trades_session_entry", table_name="trades")
    op.drop_index("ix_trades_user_entry", table_name="trades")
    op.drop_table("trades")
