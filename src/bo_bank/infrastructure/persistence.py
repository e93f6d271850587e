"""BankRepository and BankTransactionRepository — raw text() SQL.

Transactions read the bank name through a join so a rename shows up
everywhere at once. bank_transactions.bank_id is ON DELETE RESTRICT; the
service refuses the delete first with a friendlier error.
"""

from datetime import date

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_bank.domain.models import Bank, BankTransaction
from src.bo_common.errors import InternalError

# ---------------------------------------------------------------------------
# Banks
# ---------------------------------------------------------------------------

_BANK_COLUMNS = "id, name, created_by, created_by_name, created_at, updated_at"

_LIST_BANKS_SQL = text(f"""
    SELECT {_BANK_COLUMNS} FROM banks ORDER BY LOWER(name) ASC
""")

_COUNT_BANKS_SQL = text("SELECT COUNT(*) FROM banks")

_GET_BANK_SQL = text(f"""
    SELECT {_BANK_COLUMNS} FROM banks WHERE id = CAST(:bank_id AS UUID)
""")

_FIND_BANK_SQL = text(f"""
    SELECT {_BANK_COLUMNS}
    FROM banks
    WHERE LOWER(name) = LOWER(:name)
      AND (CAST(:exclude_id AS TEXT) IS NULL OR id <> CAST(:exclude_id AS UUID))
    LIMIT 1
""")

_INSERT_BANK_SQL = text(f"""
    INSERT INTO banks (name, created_by, created_by_name)
    VALUES (:name, CAST(:created_by AS UUID), :created_by_name)
    RETURNING {_BANK_COLUMNS}
""")

_RENAME_BANK_SQL = text(f"""
    UPDATE banks SET name = :name
    WHERE id = CAST(:bank_id AS UUID)
    RETURNING {_BANK_COLUMNS}
""")

_DELETE_BANK_SQL = text("""
    DELETE FROM banks WHERE id = CAST(:bank_id AS UUID)
""")

_COUNT_BANK_TXNS_SQL = text("""
    SELECT COUNT(*) FROM bank_transactions WHERE bank_id = CAST(:bank_id AS UUID)
""")


def _row_to_bank(row: object) -> Bank:
    created_by = row.created_by  # type: ignore[attr-defined]
    return Bank(
        id=str(row.id),  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        created_by=str(created_by) if created_by else None,
        created_by_name=row.created_by_name,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class BankRepository:
    async def list_banks(self, db: AsyncSession) -> list[Bank]:
        result = await db.execute(_LIST_BANKS_SQL)
        return [_row_to_bank(r) for r in result.fetchall()]

    async def count(self, db: AsyncSession) -> int:
        return int((await db.execute(_COUNT_BANKS_SQL)).scalar_one())

    async def get(self, db: AsyncSession, bank_id: str) -> Bank | None:
        row = (await db.execute(_GET_BANK_SQL, {"bank_id": bank_id})).fetchone()
        return _row_to_bank(row) if row else None

    async def find_by_name(
        self, db: AsyncSession, name: str, exclude_id: str | None = None
    ) -> Bank | None:
        row = (
            await db.execute(_FIND_BANK_SQL, {"name": name, "exclude_id": exclude_id})
        ).fetchone()
        return _row_to_bank(row) if row else None

    async def insert(
        self, db: AsyncSession, name: str, created_by: str, created_by_name: str
    ) -> Bank:
        row = (
            await db.execute(
                _INSERT_BANK_SQL,
                {"name": name, "created_by": created_by, "created_by_name": created_by_name},
            )
        ).fetchone()
        if row is None:
            raise InternalError("Bank insert returned no rows")
        return _row_to_bank(row)

    async def rename(self, db: AsyncSession, bank_id: str, name: str) -> Bank | None:
        row = (await db.execute(_RENAME_BANK_SQL, {"bank_id": bank_id, "name": name})).fetchone()
        return _row_to_bank(row) if row else None

    async def delete(self, db: AsyncSession, bank_id: str) -> bool:
        result = await db.execute(_DELETE_BANK_SQL, {"bank_id": bank_id})
        return (result.rowcount or 0) > 0

    async def count_transactions(self, db: AsyncSession, bank_id: str) -> int:
        return int(
            (await db.execute(_COUNT_BANK_TXNS_SQL, {"bank_id": bank_id})).scalar_one()
        )


# ---------------------------------------------------------------------------
# Bank transactions
# ---------------------------------------------------------------------------

_TXN_SELECT = """
    SELECT t.id, t.date, t.bank_id, b.name AS bank_name,
           t.deposit_cents, t.withdraw_cents, t.pnl_cents, t.remaining_balance_cents,
           t.submitted_by, t.submitted_by_name, t.created_at, t.updated_at
    FROM bank_transactions t
    JOIN banks b ON b.id = t.bank_id
"""

_LIST_TXNS_SQL = text(f"""
    {_TXN_SELECT}
    WHERE (CAST(:submitted_by AS TEXT) IS NULL OR t.submitted_by = CAST(:submitted_by AS UUID))
      AND (CAST(:bank_id AS TEXT) IS NULL OR t.bank_id = CAST(:bank_id AS UUID))
      AND (CAST(:date_from AS DATE) IS NULL OR t.date >= CAST(:date_from AS DATE))
      AND (CAST(:date_to AS DATE) IS NULL OR t.date <= CAST(:date_to AS DATE))
    ORDER BY t.date DESC, t.created_at DESC
""")

_GET_TXN_SQL = text(f"""
    {_TXN_SELECT}
    WHERE t.id = CAST(:transaction_id AS UUID)
""")

# Over all submitters: the running balance belongs to the bank, not the staff member.
_PREVIOUS_BALANCE_SQL = text("""
    SELECT remaining_balance_cents
    FROM bank_transactions
    WHERE bank_id = CAST(:bank_id AS UUID)
      AND date < :before
      AND (CAST(:exclude_id AS TEXT) IS NULL OR id <> CAST(:exclude_id AS UUID))
    ORDER BY date DESC, created_at DESC
    LIMIT 1
""")

_INSERT_TXN_SQL = text("""
    INSERT INTO bank_transactions
        (date, bank_id, deposit_cents, withdraw_cents, pnl_cents,
         remaining_balance_cents, submitted_by, submitted_by_name)
    VALUES
        (:date, CAST(:bank_id AS UUID), :deposit_cents, :withdraw_cents, :pnl_cents,
         :remaining_balance_cents, CAST(:submitted_by AS UUID), :submitted_by_name)
    RETURNING id
""")

_UPDATE_TXN_SQL = text("""
    UPDATE bank_transactions
    SET date = :date,
        bank_id = CAST(:bank_id AS UUID),
        deposit_cents = :deposit_cents,
        withdraw_cents = :withdraw_cents,
        pnl_cents = :pnl_cents,
        remaining_balance_cents = :remaining_balance_cents
    WHERE id = CAST(:id AS UUID)
    RETURNING id
""")

_DELETE_TXN_SQL = text("""
    DELETE FROM bank_transactions WHERE id = CAST(:transaction_id AS UUID)
""")


def _row_to_txn(row: object) -> BankTransaction:
    return BankTransaction(
        id=str(row.id),  # type: ignore[attr-defined]
        date=row.date,  # type: ignore[attr-defined]
        bank_id=str(row.bank_id),  # type: ignore[attr-defined]
        bank_name=row.bank_name,  # type: ignore[attr-defined]
        deposit_cents=row.deposit_cents,  # type: ignore[attr-defined]
        withdraw_cents=row.withdraw_cents,  # type: ignore[attr-defined]
        pnl_cents=row.pnl_cents,  # type: ignore[attr-defined]
        remaining_balance_cents=row.remaining_balance_cents,  # type: ignore[attr-defined]
        submitted_by=str(row.submitted_by),  # type: ignore[attr-defined]
        submitted_by_name=row.submitted_by_name,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _txn_params(txn: BankTransaction) -> dict[str, object]:
    return {
        "date": txn.date,
        "bank_id": txn.bank_id,
        "deposit_cents": txn.deposit_cents,
        "withdraw_cents": txn.withdraw_cents,
        "pnl_cents": txn.pnl_cents,
        "remaining_balance_cents": txn.remaining_balance_cents,
    }


class BankTransactionRepository:
    async def list_transactions(
        self,
        db: AsyncSession,
        submitted_by: str | None,
        bank_id: str | None,
        date_from: date | None,
        date_to: date | None,
    ) -> list[BankTransaction]:
        result = await db.execute(
            _LIST_TXNS_SQL,
            {
                "submitted_by": submitted_by,
                "bank_id": bank_id,
                "date_from": date_from,
                "date_to": date_to,
            },
        )
        return [_row_to_txn(r) for r in result.fetchall()]

    async def get(self, db: AsyncSession, transaction_id: str) -> BankTransaction | None:
        row = (await db.execute(_GET_TXN_SQL, {"transaction_id": transaction_id})).fetchone()
        return _row_to_txn(row) if row else None

    async def previous_balance(
        self,
        db: AsyncSession,
        bank_id: str,
        before: date,
        exclude_id: str | None = None,
    ) -> int:
        result = await db.execute(
            _PREVIOUS_BALANCE_SQL,
            {"bank_id": bank_id, "before": before, "exclude_id": exclude_id},
        )
        value = result.scalar_one_or_none()
        return int(value) if value is not None else 0

    async def insert(self, db: AsyncSession, txn: BankTransaction) -> BankTransaction:
        row = (
            await db.execute(
                _INSERT_TXN_SQL,
                {
                    **_txn_params(txn),
                    "submitted_by": txn.submitted_by,
                    "submitted_by_name": txn.submitted_by_name,
                },
            )
        ).fetchone()
        if row is None:
            raise InternalError("Bank transaction insert returned no rows")
        saved = await self.get(db, str(row.id))
        if saved is None:
            raise InternalError("Inserted bank transaction not readable")
        return saved

    async def update(self, db: AsyncSession, txn: BankTransaction) -> BankTransaction | None:
        row = (
            await db.execute(_UPDATE_TXN_SQL, {**_txn_params(txn), "id": txn.id})
        ).fetchone()
        if row is None:
            return None
        return await self.get(db, txn.id)

    async def delete(self, db: AsyncSession, transaction_id: str) -> bool:
        result = await db.execute(_DELETE_TXN_SQL, {"transaction_id": transaction_id})
        return (result.rowcount or 0) > 0
