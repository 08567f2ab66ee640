"""In-memory stand-ins for the market and account repositories.

InMemoryStore keeps a committed copy and a working copy of all state.
FakeSession.commit() promotes the working copy, rollback() discards it, so
service tests observe the same all-or-nothing behaviour as PostgreSQL.
"""

import copy
from dataclasses import dataclass, field
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from src.pm_account.domain.models import (
    ESCROW_ACCOUNT_ID,
    PLATFORM_ACCOUNT_ID,
    Account,
    LedgerEntry,
    TransferReceipt,
)
from src.pm_clearing.application.service import ClaimApplicationService
from src.pm_common.enums import LedgerEntryType
from src.pm_common.errors import InsufficientFundsError
from src.pm_market.application.service import MarketApplicationService
from src.pm_market.domain.models import Market, MarketCounters, Position

TOKEN = 1_000_000


@dataclass
class _State:
    markets: dict[int, Market] = field(default_factory=dict)
    positions: dict[tuple[int, str], Position] = field(default_factory=dict)
    counters: MarketCounters = field(default_factory=lambda: MarketCounters(1, 0))
    balances: dict[str, int] = field(
        default_factory=lambda: {ESCROW_ACCOUNT_ID: 0, PLATFORM_ACCOUNT_ID: 0}
    )
    ledger: list[LedgerEntry] = field(default_factory=list)


class InMemoryStore:
    def __init__(self) -> None:
        self.committed = _State()
        self.working = _State()

    def commit(self) -> None:
        self.committed = copy.deepcopy(self.working)

    def rollback(self) -> None:
        self.working = copy.deepcopy(self.committed)

    def ledger_sum(self, entry_type: LedgerEntryType, market_id: int | None = None) -> int:
        return sum(
            e.amount
            for e in self.committed.ledger
            if e.entry_type == entry_type.value
            and (market_id is None or e.reference_id == str(market_id))
        )


class FakeSession:
    def __init__(self, store: InMemoryStore) -> None:
        self.commit = AsyncMock(side_effect=store.commit)
        self.rollback = AsyncMock(side_effect=store.rollback)


class FakeMarketRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def get_market(self, db, market_id):
        return copy.deepcopy(self._store.working.markets.get(market_id))

    async def get_market_for_update(self, db, market_id):
        return copy.deepcopy(self._store.working.markets.get(market_id))

    async def insert_market(self, db, market):
        self._store.working.markets[market.id] = copy.deepcopy(market)

    async def save_market(self, db, market):
        self._store.working.markets[market.id] = copy.deepcopy(market)

    async def allocate_market_id(self, db):
        counters = self._store.working.counters
        market_id = counters.next_market_id
        counters.next_market_id += 1
        counters.total_markets += 1
        return market_id

    async def get_counters(self, db):
        return copy.deepcopy(self._store.working.counters)

    async def get_position(self, db, market_id, participant):
        return copy.deepcopy(self._store.working.positions.get((market_id, participant)))

    async def save_position(self, db, position):
        key = (position.market_id, position.participant)
        self._store.working.positions[key] = copy.deepcopy(position)

    async def list_positions(self, db, market_id):
        return [
            copy.deepcopy(p)
            for (mid, _), p in sorted(self._store.working.positions.items())
            if mid == market_id
        ]


class FakeAccountRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self.fail_next_transfer: Exception | None = None

    def _account(self, user_id: str) -> Account:
        now = datetime.now(UTC)
        return Account(
            id=f"acc-{user_id}",
            user_id=user_id,
            available_balance=self._store.working.balances.get(user_id, 0),
            version=0,
            created_at=now,
            updated_at=now,
        )

    def _entry(self, user_id, entry_type, amount, reference_id) -> LedgerEntry:
        entry = LedgerEntry(
            id=len(self._store.working.ledger) + 1,
            user_id=user_id,
            entry_type=entry_type.value,
            amount=amount,
            balance_after=self._store.working.balances[user_id],
            reference_id=reference_id,
        )
        self._store.working.ledger.append(entry)
        return entry

    async def get_account_by_user_id(self, db, user_id):
        if user_id not in self._store.working.balances:
            return None
        return self._account(user_id)

    async def deposit(self, db, user_id, amount):
        balances = self._store.working.balances
        balances[user_id] = balances.get(user_id, 0) + amount
        return self._account(user_id), self._entry(user_id, LedgerEntryType.DEPOSIT, amount, None)

    async def withdraw(self, db, user_id, amount):
        balances = self._store.working.balances
        if balances.get(user_id, 0) < amount:
            raise InsufficientFundsError(amount, balances.get(user_id, 0))
        balances[user_id] -= amount
        return self._account(user_id), self._entry(user_id, LedgerEntryType.WITHDRAW, -amount, None)

    async def transfer(
        self, db, amount, sender, recipient, debit_type, credit_type, reference_id, description
    ):
        if self.fail_next_transfer is not None:
            exc, self.fail_next_transfer = self.fail_next_transfer, None
            raise exc
        balances = self._store.working.balances
        available = balances.get(sender, 0)
        if available < amount:
            raise InsufficientFundsError(amount, available)
        balances[sender] = available - amount
        debit = self._entry(sender, debit_type, -amount, reference_id)
        balances[recipient] = balances.get(recipient, 0) + amount
        credit = self._entry(recipient, credit_type, amount, reference_id)
        return TransferReceipt(debit=debit, credit=credit)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def db(store: InMemoryStore) -> FakeSession:
    return FakeSession(store)


@pytest.fixture
def market_repo(store: InMemoryStore) -> FakeMarketRepository:
    return FakeMarketRepository(store)


@pytest.fixture
def accounts(store: InMemoryStore) -> FakeAccountRepository:
    return FakeAccountRepository(store)


@pytest.fixture
def market_service(market_repo, accounts) -> MarketApplicationService:
    return MarketApplicationService(repo=market_repo, accounts=accounts)


@pytest.fixture
def claim_service(market_repo, accounts) -> ClaimApplicationService:
    return ClaimApplicationService(repo=market_repo, accounts=accounts)


@pytest.fixture
def fund(store: InMemoryStore):
    """Give principals a committed starting balance."""

    def _fund(**balances: int) -> None:
        for user_id, amount in balances.items():
            store.working.balances[user_id] = store.working.balances.get(user_id, 0) + amount
        store.commit()

    return _fund
