"""Domain models for pm_account: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

ESCROW_ACCOUNT_ID = "MARKET_ESCROW"
PLATFORM_ACCOUNT_ID = "PLATFORM_FEE"

# Never valid as a caller principal
SYSTEM_ACCOUNT_IDS = frozenset({ESCROW_ACCOUNT_ID, PLATFORM_ACCOUNT_ID})


@dataclass
class Account:
    id: str
    user_id: str
    available_balance: int   # base units
    version: int
    created_at: datetime
    updated_at: datetime


@dataclass
class LedgerEntry:
    id: int                          # BIGSERIAL
    user_id: str
    entry_type: str                  # LedgerEntryType value
    amount: int                      # base units, positive=income negative=expense
    balance_after: int               # base units, available_balance snapshot after op
    reference_type: str | None = None
    reference_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None


@dataclass
class TransferReceipt:
    """Both legs of a completed transfer."""

    debit: LedgerEntry
    credit: LedgerEntry
