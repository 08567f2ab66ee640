# src/pm_market/domain/repository.py
"""Repository Protocol: dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.

Pure data access: no precondition checks, no arithmetic.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_market.domain.models import Market, MarketCounters, Position


class MarketRepositoryProtocol(Protocol):
    async def get_market(self, db: AsyncSession, market_id: int) -> Market | None: ...

    async def get_market_for_update(
        self, db: AsyncSession, market_id: int
    ) -> Market | None: ...

    async def insert_market(self, db: AsyncSession, market: Market) -> None: ...

    async def save_market(self, db: AsyncSession, market: Market) -> None: ...

    async def allocate_market_id(self, db: AsyncSession) -> int: ...

    async def get_counters(self, db: AsyncSession) -> MarketCounters: ...

    async def get_position(
        self, db: AsyncSession, market_id: int, participant: str
    ) -> Position | None: ...

    async def save_position(self, db: AsyncSession, position: Position) -> None: ...

    async def list_positions(self, db: AsyncSession, market_id: int) -> list[Position]: ...
