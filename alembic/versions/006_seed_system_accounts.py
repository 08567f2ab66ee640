"""006: seed system accounts

Revision ID: 006
Revises: 005
Create Date: 2026-10-18
"""

from typing import Sequence, Union

from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Escrow holds every staked token until claimed; PLATFORM_FEE receives creation fees
    op.execute("""
        INSERT INTO accounts (user_id, available_balance, version)
        VALUES ('MARKET_ESCROW', 0, 0), ('PLATFORM_FEE', 0, 0);
    """)


def downgrade() -> None:
    op.execute("DELETE FROM accounts WHERE user_id IN ('MARKET_ESCROW', 'PLATFORM_FEE');")
