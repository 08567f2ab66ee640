"""AccountRepository: concrete implementation of AccountRepositoryProtocol.

All balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
A debit returning 0 rows means the sender cannot cover the amount.
Credits upsert, so a principal's account row is created on first receipt.

Transaction ownership: The CALLER (application service) is responsible for
committing or rolling back. A failed transfer leaves at most a debit-free
transaction behind; rollback discards it.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.domain.models import Account, LedgerEntry, TransferReceipt
from src.pm_common.amounts import validate_amount
from src.pm_common.enums import LedgerEntryType, ReferenceType
from src.pm_common.errors import InsufficientFundsError, InternalError

# ---------------------------------------------------------------------------
# SQL: accounts mutations
# ---------------------------------------------------------------------------

_CREDIT_SQL = text("""
    INSERT INTO accounts (user_id, available_balance)
    VALUES (:user_id, :amount)
    ON CONFLICT (user_id) DO UPDATE
        SET available_balance = accounts.available_balance + EXCLUDED.available_balance,
            version = accounts.version + 1,
            updated_at = NOW()
    RETURNING id, user_id, available_balance, version, created_at, updated_at
""")

_DEBIT_SQL = text("""
    UPDATE accounts
    SET available_balance = available_balance - :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id AND available_balance >= :amount
    RETURNING id, user_id, available_balance, version, created_at, updated_at
""")

_GET_ACCOUNT_SQL = text("""
    SELECT id, user_id, available_balance, version, created_at, updated_at
    FROM accounts
    WHERE user_id = :user_id
""")

_INSERT_LEDGER_SQL = text("""
    INSERT INTO ledger_entries
        (user_id, entry_type, amount, balance_after,
         reference_type, reference_id, description)
    VALUES
        (:user_id, :entry_type, :amount, :balance_after,
         :reference_type, :reference_id, :description)
    RETURNING id, user_id, entry_type, amount, balance_after,
              reference_type, reference_id, description, created_at
""")


def _row_to_account(row: object) -> Account:
    return Account(
        id=str(row.id),  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        available_balance=row.available_balance,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_ledger(row: object) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        entry_type=row.entry_type,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        reference_type=row.reference_type,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class AccountRepository:
    """Concrete repository: all operations atomic at the SQL level."""

    async def get_account_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> Account | None:
        result = await db.execute(_GET_ACCOUNT_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def deposit(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Account, LedgerEntry]:
        account = await self._credit(db, user_id, amount)
        entry = await self._write_ledger(
            db,
            user_id=user_id,
            entry_type=LedgerEntryType.DEPOSIT,
            amount=amount,
            balance_after=account.available_balance,
            reference_type=ReferenceType.ACCOUNT,
            reference_id=None,
            description="Deposit",
        )
        return account, entry

    async def withdraw(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Account, LedgerEntry]:
        account = await self._debit(db, user_id, amount)
        entry = await self._write_ledger(
            db,
            user_id=user_id,
            entry_type=LedgerEntryType.WITHDRAW,
            amount=-amount,
            balance_after=account.available_balance,
            reference_type=ReferenceType.ACCOUNT,
            reference_id=None,
            description="Withdrawal",
        )
        return account, entry

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
    ) -> TransferReceipt:
        validate_amount(amount)
        # Debit first: a short sender fails before anything is written.
        sender_account = await self._debit(db, sender, amount)
        debit = await self._write_ledger(
            db,
            user_id=sender,
            entry_type=debit_type,
            amount=-amount,
            balance_after=sender_account.available_balance,
            reference_type=ReferenceType.MARKET,
            reference_id=reference_id,
            description=description,
        )
        recipient_account = await self._credit(db, recipient, amount)
        credit = await self._write_ledger(
            db,
            user_id=recipient,
            entry_type=credit_type,
            amount=amount,
            balance_after=recipient_account.available_balance,
            reference_type=ReferenceType.MARKET,
            reference_id=reference_id,
            description=description,
        )
        return TransferReceipt(debit=debit, credit=credit)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    async def _credit(self, db: AsyncSession, user_id: str, amount: int) -> Account:
        row = (await db.execute(_CREDIT_SQL, {"user_id": user_id, "amount": amount})).fetchone()
        if row is None:
            raise InternalError("Account upsert returned no rows")
        return _row_to_account(row)

    async def _debit(self, db: AsyncSession, user_id: str, amount: int) -> Account:
        row = (await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})).fetchone()
        if row is None:
            acc_row = (await db.execute(_GET_ACCOUNT_SQL, {"user_id": user_id})).fetchone()
            available = acc_row.available_balance if acc_row else 0
            raise InsufficientFundsError(amount, available)
        return _row_to_account(row)

    async def _write_ledger(
        self,
        db: AsyncSession,
        user_id: str,
        entry_type: LedgerEntryType,
        amount: int,
        balance_after: int,
        reference_type: ReferenceType,
        reference_id: str | None,
        description: str,
    ) -> LedgerEntry:
        result = await db.execute(
            _INSERT_LEDGER_SQL,
            {
                "user_id": user_id,
                "entry_type": entry_type.value,
                "amount": amount,
                "balance_after": balance_after,
                "reference_type": reference_type.value,
                "reference_id": reference_id,
                "description": description,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Ledger insert returned no rows")
        return _row_to_ledger(row)
