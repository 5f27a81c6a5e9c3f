"""Users table with coin balance and daily claim state.

Revision ID: 001_users
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_users"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id BIGSERIAL PRIMARY KEY,
            display_name VARCHAR(64),
            total_coins BIGINT NOT NULL DEFAULT 0,
            coins_spent BIGINT NOT NULL DEFAULT 0,
            last_daily_claim_at TIMESTAMPTZ,
            login_streak INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT users_total_coins_non_negative CHECK (total_coins >= 0),
            CONSTRAINT users_coins_spent_non_negative CHECK (coins_spent >= 0),
            CONSTRAINT users_login_streak_non_negative CHECK (login_streak >= 0)
        )
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE")
