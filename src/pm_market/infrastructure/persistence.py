"""MarketRepository: concrete implementation of MarketRepositoryProtocol.

All queries use raw text() SQL (no ORM).
Transaction ownership: the CALLER (application service) commits or rolls back.
Rows read via get_market_for_update stay locked until that commit/rollback,
which serializes every mutating call on the same market.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.errors import InternalError
from src.pm_market.domain.models import Market, MarketCounters, Position

# ---------------------------------------------------------------------------
# SQL: markets
# ---------------------------------------------------------------------------

_MARKET_COLUMNS = """
    id, creator, title, description,
    created_block, expiry_block, resolution_block, outcome,
    total_yes_amount, total_no_amount, is_resolved, fee_collected
"""

_GET_MARKET_SQL = text(f"SELECT {_MARKET_COLUMNS} FROM markets WHERE id = :market_id")

_GET_MARKET_FOR_UPDATE_SQL = text(
    f"SELECT {_MARKET_COLUMNS} FROM markets WHERE id = :market_id FOR UPDATE"
)

_INSERT_MARKET_SQL = text("""
    INSERT INTO markets
        (id, creator, title, description, created_block, expiry_block,
         total_yes_amount, total_no_amount, is_resolved, fee_collected)
    VALUES
        (:id, :creator, :title, :description, :created_block, :expiry_block,
         :total_yes_amount, :total_no_amount, :is_resolved, :fee_collected)
""")

_SAVE_MARKET_SQL = text("""
    UPDATE markets
    SET total_yes_amount = :total_yes_amount,
        total_no_amount  = :total_no_amount,
        fee_collected    = :fee_collected,
        is_resolved      = :is_resolved,
        outcome          = :outcome,
        resolution_block = :resolution_block,
        updated_at = NOW()
    WHERE id = :id
""")

# ---------------------------------------------------------------------------
# SQL: counters (single row, id = 1)
# ---------------------------------------------------------------------------

_ALLOCATE_ID_SQL = text("""
    UPDATE market_counters
    SET next_market_id = next_market_id + 1,
        total_markets  = total_markets + 1
    WHERE id = 1
    RETURNING next_market_id - 1 AS market_id
""")

_GET_COUNTERS_SQL = text(
    "SELECT next_market_id, total_markets FROM market_counters WHERE id = 1"
)

# ---------------------------------------------------------------------------
# SQL: positions
# ---------------------------------------------------------------------------

_GET_POSITION_SQL = text("""
    SELECT market_id, participant, yes_amount, no_amount, has_claimed
    FROM positions
    WHERE market_id = :market_id AND participant = :participant
""")

_UPSERT_POSITION_SQL = text("""
    INSERT INTO positions (market_id, participant, yes_amount, no_amount, has_claimed)
    VALUES (:market_id, :participant, :yes_amount, :no_amount, :has_claimed)
    ON CONFLICT (market_id, participant) DO UPDATE
        SET yes_amount  = EXCLUDED.yes_amount,
            no_amount   = EXCLUDED.no_amount,
            has_claimed = EXCLUDED.has_claimed,
            updated_at  = NOW()
""")

_LIST_POSITIONS_SQL = text("""
    SELECT market_id, participant, yes_amount, no_amount, has_claimed
    FROM positions
    WHERE market_id = :market_id
    ORDER BY participant
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_market(row: object) -> Market:
    return Market(
        id=row.id,  # type: ignore[attr-defined]
        creator=row.creator,  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_block=row.created_block,  # type: ignore[attr-defined]
        expiry_block=row.expiry_block,  # type: ignore[attr-defined]
        resolution_block=row.resolution_block,  # type: ignore[attr-defined]
        outcome=row.outcome,  # type: ignore[attr-defined]
        total_yes_amount=row.total_yes_amount,  # type: ignore[attr-defined]
        total_no_amount=row.total_no_amount,  # type: ignore[attr-defined]
        is_resolved=row.is_resolved,  # type: ignore[attr-defined]
        fee_collected=row.fee_collected,  # type: ignore[attr-defined]
    )


def _row_to_position(row: object) -> Position:
    return Position(
        market_id=row.market_id,  # type: ignore[attr-defined]
        participant=row.participant,  # type: ignore[attr-defined]
        yes_amount=row.yes_amount,  # type: ignore[attr-defined]
        no_amount=row.no_amount,  # type: ignore[attr-defined]
        has_claimed=row.has_claimed,  # type: ignore[attr-defined]
    )


def _market_params(market: Market) -> dict[str, object]:
    return {
        "id": market.id,
        "creator": market.creator,
        "title": market.title,
        "description": market.description,
        "created_block": market.created_block,
        "expiry_block": market.expiry_block,
        "resolution_block": market.resolution_block,
        "outcome": market.outcome,
        "total_yes_amount": market.total_yes_amount,
        "total_no_amount": market.total_no_amount,
        "is_resolved": market.is_resolved,
        "fee_collected": market.fee_collected,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class MarketRepository:
    """Concrete repository: two keyed tables plus the counters row."""

    async def get_market(self, db: AsyncSession, market_id: int) -> Market | None:
        row = (await db.execute(_GET_MARKET_SQL, {"market_id": market_id})).fetchone()
        return _row_to_market(row) if row else None

    async def get_market_for_update(
        self, db: AsyncSession, market_id: int
    ) -> Market | None:
        row = (
            await db.execute(_GET_MARKET_FOR_UPDATE_SQL, {"market_id": market_id})
        ).fetchone()
        return _row_to_market(row) if row else None

    async def insert_market(self, db: AsyncSession, market: Market) -> None:
        await db.execute(_INSERT_MARKET_SQL, _market_params(market))

    async def save_market(self, db: AsyncSession, market: Market) -> None:
        await db.execute(_SAVE_MARKET_SQL, _market_params(market))

    async def allocate_market_id(self, db: AsyncSession) -> int:
        row = (await db.execute(_ALLOCATE_ID_SQL)).fetchone()
        if row is None:
            raise InternalError("market_counters row is missing")
        return int(row.market_id)

    async def get_counters(self, db: AsyncSession) -> MarketCounters:
        row = (await db.execute(_GET_COUNTERS_SQL)).fetchone()
        if row is None:
            raise InternalError("market_counters row is missing")
        return MarketCounters(
            next_market_id=row.next_market_id,
            total_markets=row.total_markets,
        )

    async def get_position(
        self, db: AsyncSession, market_id: int, participant: str
    ) -> Position | None:
        row = (
            await db.execute(
                _GET_POSITION_SQL, {"market_id": market_id, "participant": participant}
            )
        ).fetchone()
        return _row_to_position(row) if row else None

    async def save_position(self, db: AsyncSession, position: Position) -> None:
        await db.execute(
            _UPSERT_POSITION_SQL,
            {
                "market_id": position.market_id,
                "participant": position.participant,
                "yes_amount": position.yes_amount,
                "no_amount": position.no_amount,
                "has_claimed": position.has_claimed,
            },
        )

    async def list_positions(self, db: AsyncSession, market_id: int) -> list[Position]:
        rows = (await db.execute(_LIST_POSITIONS_SQL, {"market_id": market_id})).fetchall()
        return [_row_to_position(row) for row in rows]
