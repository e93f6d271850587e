"""006: create bank_transactions

Revision ID: 006
Revises: 005
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE bank_transactions (
            id                      UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            date                    DATE            NOT NULL,
            bank_id                 UUID            NOT NULL REFERENCES banks (id) ON DELETE RESTRICT,
            deposit_cents           BIGINT          NOT NULL DEFAULT 0,
            withdraw_cents          BIGINT          NOT NULL DEFAULT 0,
            pnl_cents               BIGINT,
            remaining_balance_cents BIGINT          NOT NULL DEFAULT 0,
            submitted_by            UUID            NOT NULL,
            submitted_by_name       VARCHAR(255)    NOT NULL,
            created_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_bank_txn_amounts_non_negative CHECK (deposit_cents >= 0 AND withdraw_cents >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_bank_txn_date ON bank_transactions (date DESC, created_at DESC);")
    # previous-balance lookup: latest row of a bank before a date
    op.execute("CREATE INDEX idx_bank_txn_bank_date ON bank_transactions (bank_id, date DESC, created_at DESC);")
    op.execute("CREATE INDEX idx_bank_txn_submitted_by ON bank_transactions (submitted_by, date DESC);")
    op.execute("""
        CREATE TRIGGER trg_bank_transactions_updated_at
            BEFORE UPDATE ON bank_transactions
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bank_transactions CASCADE;")
