"""Repository Protocol: dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.

`transfer` is the value-transfer primitive the market engines depend on:
it either moves the full amount and records both ledger legs, or raises
InsufficientFundsError having changed nothing the caller's rollback
would not undo.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.domain.models import Account, LedgerEntry, TransferReceipt
from src.pm_common.enums import LedgerEntryType


class AccountRepositoryProtocol(Protocol):
    async def get_account_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> Account | None: ...

    async def deposit(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Account, LedgerEntry]: ...

    async def withdraw(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Account, LedgerEntry]: ...

    async def transfer(
        self,
        db: AsyncSession,
        amount: int,
        sender: str,
        recipient: str,
        debit_type: LedgerEntryType,
        credit_type: LedgerEntryType,
        reference_id: str,
        description: str,
    ) -> TransferReceipt: ...
