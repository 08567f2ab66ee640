"""ClaimApplicationService: pays a winner out of escrow exactly once."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.domain.models import ESCROW_ACCOUNT_ID
from src.pm_account.domain.repository import AccountRepositoryProtocol
from src.pm_account.infrastructure.persistence import AccountRepository
from src.pm_clearing.application.claim_schemas import ClaimResponse
from src.pm_clearing.domain.claim import settle_claim
from src.pm_common.enums import LedgerEntryType
from src.pm_common.errors import MarketNotFoundError
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository

logger = logging.getLogger(__name__)


class ClaimApplicationService:
    def __init__(
        self,
        repo: MarketRepositoryProtocol | None = None,
        accounts: AccountRepositoryProtocol | None = None,
    ) -> None:
        self._repo: MarketRepositoryProtocol = repo or MarketRepository()
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()

    async def claim(self, db: AsyncSession, market_id: int, caller: str) -> ClaimResponse:
        try:
            # Market row lock serializes concurrent claims on this market.
            market = await self._repo.get_market_for_update(db, market_id)
            if market is None:
                raise MarketNotFoundError(market_id)
            position = await self._repo.get_position(db, market_id, caller)
            winnings = settle_claim(market, position)

            # Flag first, then pay; commit covers both or neither.
            await self._repo.save_position(db, position)  # type: ignore[arg-type]
            await self._accounts.transfer(
                db,
                amount=winnings,
                sender=ESCROW_ACCOUNT_ID,
                recipient=caller,
                debit_type=LedgerEntryType.CLAIM_ESCROW_OUT,
                credit_type=LedgerEntryType.CLAIM_PAYOUT,
                reference_id=str(market_id),
                description="Claim winnings",
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Claim paid: market=%d caller=%s amount=%d", market_id, caller, winnings)
        return ClaimResponse.from_result(
            market_id=market_id,
            participant=caller,
            outcome=bool(market.outcome),
            amount=winnings,
        )
