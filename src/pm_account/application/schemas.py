"""Pydantic schemas for pm_account API."""

from pydantic import BaseModel, Field

from src.pm_common.amounts import amount_to_display

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class DepositRequest(BaseModel):
    amount: int = Field(..., gt=0, description="Amount to deposit in base units")


class WithdrawRequest(BaseModel):
    amount: int = Field(..., gt=0, description="Amount to withdraw in base units")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    user_id: str
    available_balance: int
    available_balance_display: str

    @classmethod
    def from_amount(cls, user_id: str, available: int) -> "BalanceResponse":
        return cls(
            user_id=user_id,
            available_balance=available,
            available_balance_display=amount_to_display(available),
        )


class BalanceChangeResponse(BaseModel):
    available_balance: int
    available_balance_display: str
    amount: int
    amount_display: str
    ledger_entry_id: int

    @classmethod
    def from_result(cls, available: int, amount: int, entry_id: int) -> "BalanceChangeResponse":
        return cls(
            available_balance=available,
            available_balance_display=amount_to_display(available),
            amount=amount,
            amount_display=amount_to_display(amount),
            ledger_entry_id=entry_id,
        )
