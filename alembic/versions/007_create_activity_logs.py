"""007: create activity_logs

Revision ID: 007
Revises: 006
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # No FK on user_id: the trail survives deletion of the acting staff member
    op.execute("""
        CREATE TABLE activity_logs (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            action          VARCHAR(64)     NOT NULL,
            description     TEXT            NOT NULL,
            details         TEXT,
            user_id         UUID            NOT NULL,
            user_name       VARCHAR(255)    NOT NULL,
            ip_address      VARCHAR(64),
            timestamp       TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("CREATE INDEX idx_activity_logs_timestamp ON activity_logs (timestamp DESC, id DESC);")
    op.execute("CREATE INDEX idx_activity_logs_user ON activity_logs (user_id, timestamp DESC);")
    op.execute("CREATE INDEX idx_activity_logs_action ON activity_logs (action, timestamp DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS activity_logs CASCADE;")
