"""Pydantic schemas for claim settlement."""

from pydantic import BaseModel

from src.pm_common.amounts import amount_to_display


class ClaimResponse(BaseModel):
    market_id: int
    participant: str
    outcome: bool
    amount_paid: int
    amount_paid_display: str

    @classmethod
    def from_result(
        cls, market_id: int, participant: str, outcome: bool, amount: int
    ) -> "ClaimResponse":
        return cls(
            market_id=market_id,
            participant=participant,
            outcome=outcome,
            amount_paid=amount,
            amount_paid_display=amount_to_display(amount),
        )
