"""MarketApplicationService: create / place-stake / resolve and market reads.

Each mutating method is one all-or-nothing unit: every repository write and
the transfer primitive share the caller's session, which is committed only
after all of them succeed and rolled back on any exception. Caller identity
and the logical clock (`now`) are explicit parameters.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pm_account.domain.models import ESCROW_ACCOUNT_ID, PLATFORM_ACCOUNT_ID
from src.pm_account.domain.repository import AccountRepositoryProtocol
from src.pm_account.infrastructure.persistence import AccountRepository
from src.pm_common.amounts import amount_to_display
from src.pm_common.enums import LedgerEntryType, StakeSide
from src.pm_common.errors import MarketNotFoundError
from src.pm_market.application.schemas import (
    ContractStatsResponse,
    CreateMarketResponse,
    MarketDetail,
    PositionDetail,
    StakeResponse,
)
from src.pm_market.domain.lifecycle import (
    apply_resolution,
    apply_stake,
    check_can_resolve,
    check_can_stake,
    new_market,
    validate_market_params,
    validate_outcome,
)
from src.pm_market.domain.models import Position
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository

logger = logging.getLogger(__name__)


class MarketApplicationService:
    def __init__(
        self,
        repo: MarketRepositoryProtocol | None = None,
        accounts: AccountRepositoryProtocol | None = None,
    ) -> None:
        self._repo: MarketRepositoryProtocol = repo or MarketRepository()
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_market(
        self,
        db: AsyncSession,
        creator: str,
        title: str,
        description: str,
        duration_blocks: int,
        now: int,
    ) -> CreateMarketResponse:
        validate_market_params(title, description, duration_blocks)
        try:
            market_id = await self._repo.allocate_market_id(db)
            if settings.MARKET_CREATION_FEE > 0:
                await self._accounts.transfer(
                    db,
                    amount=settings.MARKET_CREATION_FEE,
                    sender=creator,
                    recipient=PLATFORM_ACCOUNT_ID,
                    debit_type=LedgerEntryType.CREATION_FEE,
                    credit_type=LedgerEntryType.CREATION_FEE_REVENUE,
                    reference_id=str(market_id),
                    description="Market creation fee",
                )
            market = new_market(market_id, creator, title, description, duration_blocks, now)
            await self._repo.insert_market(db, market)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Market created: id=%d creator=%s expiry_block=%d", market.id, creator, market.expiry_block
        )
        return CreateMarketResponse(
            market_id=market.id,
            expiry_block=market.expiry_block,
            creation_fee=settings.MARKET_CREATION_FEE,
        )

    async def place_stake(
        self,
        db: AsyncSession,
        market_id: int,
        outcome: object,
        amount: int,
        caller: str,
        now: int,
    ) -> StakeResponse:
        try:
            market = await self._repo.get_market_for_update(db, market_id)
            if market is None:
                raise MarketNotFoundError(market_id)
            is_yes = validate_outcome(outcome)
            side = StakeSide.from_outcome(is_yes)
            check_can_stake(market, amount, now)

            await self._accounts.transfer(
                db,
                amount=amount,
                sender=caller,
                recipient=ESCROW_ACCOUNT_ID,
                debit_type=LedgerEntryType.STAKE,
                credit_type=LedgerEntryType.STAKE_ESCROW_IN,
                reference_id=str(market_id),
                description=f"Stake {side.value}",
            )

            position = await self._repo.get_position(db, market_id, caller)
            if position is None:
                position = Position(market_id=market_id, participant=caller)
            fee, net = apply_stake(market, position, is_yes, amount)

            await self._repo.save_position(db, position)
            await self._repo.save_market(db, market)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Stake placed: market=%d caller=%s side=%s gross=%d fee=%d net=%d",
            market_id, caller, side.value, amount, fee, net,
        )
        return StakeResponse(
            market_id=market_id,
            outcome=is_yes,
            gross_amount=amount,
            fee=fee,
            net_amount=net,
            net_amount_display=amount_to_display(net),
            position=PositionDetail.from_domain(position),
            total_yes_amount=market.total_yes_amount,
            total_no_amount=market.total_no_amount,
        )

    async def resolve_market(
        self,
        db: AsyncSession,
        market_id: int,
        outcome: object,
        caller: str,
        now: int,
    ) -> MarketDetail:
        try:
            market = await self._repo.get_market_for_update(db, market_id)
            if market is None:
                raise MarketNotFoundError(market_id)
            winner = validate_outcome(outcome)
            check_can_resolve(market, caller, now)
            apply_resolution(market, winner, now)
            await self._repo.save_market(db, market)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Market resolved: id=%d outcome=%s block=%d",
            market_id, StakeSide.from_outcome(winner).value, now,
        )
        return MarketDetail.from_domain(market)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_market(self, db: AsyncSession, market_id: int) -> MarketDetail | None:
        market = await self._repo.get_market(db, market_id)
        return MarketDetail.from_domain(market) if market else None

    async def get_position(
        self, db: AsyncSession, market_id: int, participant: str
    ) -> PositionDetail | None:
        position = await self._repo.get_position(db, market_id, participant)
        return PositionDetail.from_domain(position) if position else None

    async def get_total_markets(self, db: AsyncSession) -> int:
        return (await self._repo.get_counters(db)).total_markets

    async def get_next_market_id(self, db: AsyncSession) -> int:
        return (await self._repo.get_counters(db)).next_market_id

    async def get_contract_stats(self, db: AsyncSession) -> ContractStatsResponse:
        counters = await self._repo.get_counters(db)
        return ContractStatsResponse(
            total_markets=counters.total_markets,
            next_market_id=counters.next_market_id,
            owner=settings.CONTRACT_OWNER,
            minimum_stake=settings.MINIMUM_STAKE,
            fee_rate_numerator=settings.FEE_RATE_NUMERATOR,
            fee_rate_denominator=settings.FEE_RATE_DENOMINATOR,
            creation_fee=settings.MARKET_CREATION_FEE,
        )
