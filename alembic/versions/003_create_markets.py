"""003: create markets and market_counters tables

Revision ID: 003
Revises: 002
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE markets (
            id                  BIGINT       PRIMARY KEY,
            creator             VARCHAR(128) NOT NULL,
            title               VARCHAR(100) NOT NULL,
            description         VARCHAR(500) NOT NULL DEFAULT '',
            created_block       BIGINT       NOT NULL,
            expiry_block        BIGINT       NOT NULL,
            resolution_block    BIGINT,
            outcome             BOOLEAN,
            total_yes_amount    BIGINT       NOT NULL DEFAULT 0,
            total_no_amount     BIGINT       NOT NULL DEFAULT 0,
            is_resolved         BOOLEAN      NOT NULL DEFAULT FALSE,
            fee_collected       BIGINT       NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_markets_id_gte_1          CHECK (id >= 1),
            CONSTRAINT ck_markets_title_not_empty   CHECK (char_length(title) > 0),
            CONSTRAINT ck_markets_expiry_after      CHECK (expiry_block > created_block),
            CONSTRAINT ck_markets_totals_gte_0      CHECK (
                total_yes_amount >= 0 AND total_no_amount >= 0 AND fee_collected >= 0
            ),
            CONSTRAINT ck_markets_resolution_consistent CHECK (
                (is_resolved AND outcome IS NOT NULL AND resolution_block IS NOT NULL)
                OR (NOT is_resolved AND outcome IS NULL AND resolution_block IS NULL)
            )
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_markets_updated_at
            BEFORE UPDATE ON markets
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("CREATE INDEX idx_markets_creator ON markets (creator);")

    op.execute("""
        CREATE TABLE market_counters (
            id              SMALLINT PRIMARY KEY,
            next_market_id  BIGINT   NOT NULL,
            total_markets   BIGINT   NOT NULL,
            CONSTRAINT ck_market_counters_single_row CHECK (id = 1),
            CONSTRAINT ck_market_counters_consistent CHECK (next_market_id = total_markets + 1)
        );
    """)
    op.execute("INSERT INTO market_counters (id, next_market_id, total_markets) VALUES (1, 1, 0);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS market_counters CASCADE;")
    op.execute("DROP TABLE IF EXISTS markets CASCADE;")
