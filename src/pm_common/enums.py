"""Global enums: must match DB CHECK constraints exactly."""

from enum import Enum


class MarketState(str, Enum):
    """Derived lifecycle state; never stored, computed from the clock."""
    OPEN = "OPEN"
    EXPIRED = "EXPIRED"
    RESOLVED = "RESOLVED"


class StakeSide(str, Enum):
    YES = "YES"
    NO = "NO"

    @classmethod
    def from_outcome(cls, outcome: bool) -> "StakeSide":
        return cls.YES if outcome else cls.NO


class LedgerEntryType(str, Enum):
    # Deposit/Withdraw
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    # Market creation (creator + platform paired)
    CREATION_FEE = "CREATION_FEE"
    CREATION_FEE_REVENUE = "CREATION_FEE_REVENUE"
    # Stake (participant + escrow paired)
    STAKE = "STAKE"
    STAKE_ESCROW_IN = "STAKE_ESCROW_IN"
    # Claim (escrow + participant paired)
    CLAIM_ESCROW_OUT = "CLAIM_ESCROW_OUT"
    CLAIM_PAYOUT = "CLAIM_PAYOUT"


class ReferenceType(str, Enum):
    MARKET = "MARKET"
    ACCOUNT = "ACCOUNT"
