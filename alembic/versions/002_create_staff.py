"""002: create staff table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE staff (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            name            VARCHAR(255)    NOT NULL,
            email           VARCHAR(255)    NOT NULL,
            password_hash   VARCHAR(255)    NOT NULL,
            role            VARCHAR(64)     NOT NULL,
            status          VARCHAR(16)     NOT NULL DEFAULT 'active',
            permissions     JSONB           NOT NULL DEFAULT '{}'::jsonb,
            is_archived     BOOLEAN         NOT NULL DEFAULT FALSE,
            archived_at     TIMESTAMPTZ,
            last_login      TIMESTAMPTZ,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_staff_email       UNIQUE (email),
            CONSTRAINT ck_staff_status      CHECK (status IN ('active', 'inactive'))
        );
    """)
    op.execute("CREATE UNIQUE INDEX uq_staff_email_lower ON staff (LOWER(email));")
    op.execute("CREATE INDEX idx_staff_role ON staff (role);")
    op.execute("""
        CREATE TRIGGER trg_staff_updated_at
            BEFORE UPDATE ON staff
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE staff IS 'Back-office staff accounts and permission matrices';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS staff CASCADE;")
