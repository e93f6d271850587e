"""003: create roles table and seed the default roles

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE roles (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            name            VARCHAR(64)     NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_roles_name_not_blank CHECK (NOT fn_is_blank(name))
        );
    """)
    op.execute("CREATE UNIQUE INDEX uq_roles_name_lower ON roles (LOWER(name));")
    op.execute("""
        CREATE TRIGGER trg_roles_updated_at
            BEFORE UPDATE ON roles
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    # staff.role references roles by name; renames are cascaded by the service
    op.execute("""
        INSERT INTO roles (name) VALUES
            ('Super Admin'), ('Admin'), ('Manager'), ('Accountant'), ('Viewer');
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS roles CASCADE;")
