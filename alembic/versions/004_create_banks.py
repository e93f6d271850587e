"""004: create banks table and seed common banks

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE banks (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            name            VARCHAR(255)    NOT NULL,
            created_by      UUID,
            created_by_name VARCHAR(255),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_banks_name_not_blank CHECK (NOT fn_is_blank(name))
        );
    """)
    op.execute("CREATE UNIQUE INDEX uq_banks_name_lower ON banks (LOWER(name));")
    op.execute("""
        CREATE TRIGGER trg_banks_updated_at
            BEFORE UPDATE ON banks
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("""
        INSERT INTO banks (name) VALUES
            ('Bank of America'), ('Chase Bank'), ('Wells Fargo'),
            ('JPMorgan Chase'), ('Citibank'), ('HSBC Bank'), ('TD Bank');
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS banks CASCADE;")
