"""Litigation completion ledgers, coin ledger and conversions.

Creates litigation_substage_completions, litigation_stage_completions,
coin_ledger and coin_conversions. The (user_id, substage_id) and
(user_id, stage_id) unique constraints are what make completion awards
idempotent under concurrent requests.

Revision ID: 002_litigation_rewards
Revises: 001_users
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "002_litigation_rewards"
down_revision: str | None = "001_users"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Substage completions ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS litigation_substage_completions (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            stage_id INTEGER NOT NULL,
            stage_name VARCHAR(64) NOT NULL,
            substage_id TEXT NOT NULL,
            substage_name TEXT NOT NULL,
            substage_type VARCHAR(32) NOT NULL,
            coins_awarded INTEGER NOT NULL,
            completed_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT litigation_substage_completions_user_substage_key UNIQUE (user_id, substage_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_litigation_substage_completions_user_id
        ON litigation_substage_completions(user_id)
    """)

    # --- Stage completions ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS litigation_stage_completions (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            stage_id INTEGER NOT NULL,
            stage_name VARCHAR(64) NOT NULL,
            coins_awarded INTEGER NOT NULL,
            all_substages_completed BOOLEAN NOT NULL DEFAULT false,
            completed_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT litigation_stage_completions_user_stage_key UNIQUE (user_id, stage_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_litigation_stage_completions_user_id
        ON litigation_stage_completions(user_id)
    """)

    # --- Coin ledger ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS coin_ledger (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            amount INTEGER NOT NULL,
            reason VARCHAR(32) NOT NULL,
            source_id VARCHAR(128),
            balance_after BIGINT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_coin_ledger_user_id
        ON coin_ledger(user_id)
    """)

    # --- Conversions ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS coin_conversions (
            id BIGSERIAL PRIMARY KEY,
            user_id BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            coins_converted INTEGER NOT NULL,
            credit_amount INTEGER NOT NULL,
            conversion_rate INTEGER NOT NULL,
            converted_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS ix_coin_conversions_user_id
        ON coin_conversions(user_id)
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS coin_conversions CASCADE")
    op.execute("DROP TABLE IF EXISTS coin_ledger CASCADE")
    op.execute("DROP TABLE IF EXISTS litigation_stage_completions CASCADE")
    op.execute("DROP TABLE IF EXISTS litigation_substage_completions CASCADE")
