"""001: create common functions

Revision ID: 001
Revises: 
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # gen_random_uuid() for every primary key
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto;")
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_update_timestamp()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    # Backs the *_name_not_blank CHECK constraints
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_is_blank(value TEXT)
        RETURNS BOOLEAN AS $$
            SELECT value IS NULL OR LENGTH(BTRIM(value)) = 0;
        $$ LANGUAGE sql IMMUTABLE;
    """)


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS fn_is_blank(TEXT);")
    op.execute("DROP FUNCTION IF EXISTS fn_update_timestamp();")
