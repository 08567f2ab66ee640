"""AccountApplicationService: funding and balance queries for participants.

Deposit and withdraw commit on success and roll back on any error.
get_balance is read-only and runs without an explicit transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.application.schemas import BalanceChangeResponse, BalanceResponse
from src.pm_account.domain.repository import AccountRepositoryProtocol
from src.pm_account.infrastructure.persistence import AccountRepository

logger = logging.getLogger(__name__)


class AccountApplicationService:
    def __init__(self, repo: AccountRepositoryProtocol | None = None) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        account = await self._repo.get_account_by_user_id(db, user_id)
        available = account.available_balance if account else 0
        return BalanceResponse.from_amount(user_id=user_id, available=available)

    async def deposit(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> BalanceChangeResponse:
        try:
            account, entry = await self._repo.deposit(db, user_id, amount)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Deposit: user=%s amount=%d balance=%d", user_id, amount, account.available_balance)
        return BalanceChangeResponse.from_result(
            available=account.available_balance,
            amount=amount,
            entry_id=entry.id,
        )

    async def withdraw(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> BalanceChangeResponse:
        try:
            account, entry = await self._repo.withdraw(db, user_id, amount)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Withdraw: user=%s amount=%d balance=%d", user_id, amount, account.available_balance)
        return BalanceChangeResponse.from_result(
            available=account.available_balance,
            amount=amount,
            entry_id=entry.id,
        )
