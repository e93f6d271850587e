"""005: create deposit_entries, client_incentives and expenses

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # submitted_by carries no FK: entries outlive the staff member who filed them
    op.execute("""
        CREATE TABLE deposit_entries (
            id                  UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            date                DATE            NOT NULL,
            local_deposit       BIGINT          NOT NULL DEFAULT 0,
            usdt_deposit        BIGINT          NOT NULL DEFAULT 0,
            cash_deposit        BIGINT          NOT NULL DEFAULT 0,
            local_withdraw      BIGINT          NOT NULL DEFAULT 0,
            usdt_withdraw       BIGINT          NOT NULL DEFAULT 0,
            cash_withdraw       BIGINT          NOT NULL DEFAULT 0,
            submitted_by        UUID            NOT NULL,
            submitted_by_name   VARCHAR(255)    NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_deposit_amounts_non_negative CHECK (
                local_deposit >= 0 AND usdt_deposit >= 0 AND cash_deposit >= 0
                AND local_withdraw >= 0 AND usdt_withdraw >= 0 AND cash_withdraw >= 0
            )
        );
    """)
    op.execute("CREATE INDEX idx_deposit_entries_date ON deposit_entries (date DESC, created_at DESC);")
    op.execute("CREATE INDEX idx_deposit_entries_submitted_by ON deposit_entries (submitted_by, date DESC);")
    op.execute("""
        CREATE TRIGGER trg_deposit_entries_updated_at
            BEFORE UPDATE ON deposit_entries
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)

    op.execute("""
        CREATE TABLE client_incentives (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            deposit_id      UUID            NOT NULL REFERENCES deposit_entries (id) ON DELETE CASCADE,
            position        INT             NOT NULL DEFAULT 0,
            name            VARCHAR(255)    NOT NULL,
            amount_cents    BIGINT          NOT NULL,
            CONSTRAINT ck_incentive_amount_positive CHECK (amount_cents > 0),
            CONSTRAINT ck_incentive_name_not_blank CHECK (NOT fn_is_blank(name))
        );
    """)
    op.execute("CREATE INDEX idx_client_incentives_deposit ON client_incentives (deposit_id, position);")

    op.execute("""
        CREATE TABLE expenses (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            deposit_id      UUID            NOT NULL REFERENCES deposit_entries (id) ON DELETE CASCADE,
            position        INT             NOT NULL DEFAULT 0,
            type            VARCHAR(32)     NOT NULL,
            amount_cents    BIGINT          NOT NULL,
            description     TEXT,
            CONSTRAINT ck_expense_amount_positive CHECK (amount_cents > 0)
        );
    """)
    op.execute("CREATE INDEX idx_expenses_deposit ON expenses (deposit_id, position);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS expenses CASCADE;")
    op.execute("DROP TABLE IF EXISTS client_incentives CASCADE;")
    op.execute("DROP TABLE IF EXISTS deposit_entries CASCADE;")
