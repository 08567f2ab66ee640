"""004: create positions table

Revision ID: 004
Revises: 003
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE positions (
            market_id       BIGINT       NOT NULL REFERENCES markets (id),
            participant     VARCHAR(128) NOT NULL,
            yes_amount      BIGINT       NOT NULL DEFAULT 0,
            no_amount       BIGINT       NOT NULL DEFAULT 0,
            has_claimed     BOOLEAN      NOT NULL DEFAULT FALSE,
            created_at      TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            PRIMARY KEY (market_id, participant),
            CONSTRAINT ck_positions_amounts_gte_0 CHECK (yes_amount >= 0 AND no_amount >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_positions_updated_at
            BEFORE UPDATE ON positions
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("CREATE INDEX idx_positions_participant ON positions (participant);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS positions CASCADE;")
