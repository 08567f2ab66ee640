"""Read-side ledger queries used by the invariant audit and market stats.

Ledger rows are written by AccountRepository inside the operation's
transaction; nothing here writes.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import LedgerEntryType, ReferenceType

_SUM_MARKET_ENTRIES_SQL = text("""
    SELECT COALESCE(SUM(amount), 0)
    FROM ledger_entries
    WHERE entry_type = :entry_type
      AND reference_type = :reference_type
      AND reference_id = :reference_id
""")

_SUM_ENTRIES_SQL = text("""
    SELECT COALESCE(SUM(amount), 0)
    FROM ledger_entries
    WHERE entry_type = :entry_type
""")

_MARKET_TOTALS_SQL = text(
    "SELECT COALESCE(SUM(total_yes_amount + total_no_amount + fee_collected), 0) FROM markets"
)


async def sum_market_entries(
    db: AsyncSession, market_id: int, entry_type: LedgerEntryType
) -> int:
    """Signed sum of one entry type referencing one market."""
    result = await db.execute(
        _SUM_MARKET_ENTRIES_SQL,
        {
            "entry_type": entry_type.value,
            "reference_type": ReferenceType.MARKET.value,
            "reference_id": str(market_id),
        },
    )
    return int(result.scalar_one())


async def sum_entries(db: AsyncSession, entry_type: LedgerEntryType) -> int:
    result = await db.execute(_SUM_ENTRIES_SQL, {"entry_type": entry_type.value})
    return int(result.scalar_one())


async def sum_market_totals(db: AsyncSession) -> int:
    """Σ (yes + no + fee) over every market: must equal all gross stakes ever placed."""
    result = await db.execute(_MARKET_TOTALS_SQL)
    return int(result.scalar_one())
