"""DepositRepository — raw text() SQL over deposit_entries and its child tables.

client_incentives and expenses are owned by their entry (ON DELETE CASCADE)
and are replaced wholesale on update. The caller owns the transaction.
"""

from collections import defaultdict
from datetime import date

from sqlalchemy import bindparam, text
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_common.errors import InternalError
from src.bo_deposit.domain.models import ClientIncentive, DepositEntry, Expense

_ENTRY_COLUMNS = """
    id, date,
    local_deposit, usdt_deposit, cash_deposit,
    local_withdraw, usdt_withdraw, cash_withdraw,
    submitted_by, submitted_by_name, created_at, updated_at
"""

_LIST_SQL = text(f"""
    SELECT {_ENTRY_COLUMNS}
    FROM deposit_entries
    WHERE (CAST(:submitted_by AS TEXT) IS NULL OR submitted_by = CAST(:submitted_by AS UUID))
      AND (CAST(:date_from AS DATE) IS NULL OR date >= CAST(:date_from AS DATE))
      AND (CAST(:date_to AS DATE) IS NULL OR date <= CAST(:date_to AS DATE))
    ORDER BY date DESC, created_at DESC
""")

_GET_SQL = text(f"""
    SELECT {_ENTRY_COLUMNS}
    FROM deposit_entries
    WHERE id = CAST(:deposit_id AS UUID)
""")

_INSERT_SQL = text(f"""
    INSERT INTO deposit_entries
        (date, local_deposit, usdt_deposit, cash_deposit,
         local_withdraw, usdt_withdraw, cash_withdraw,
         submitted_by, submitted_by_name)
    VALUES
        (:date, :local_deposit, :usdt_deposit, :cash_deposit,
         :local_withdraw, :usdt_withdraw, :cash_withdraw,
         CAST(:submitted_by AS UUID), :submitted_by_name)
    RETURNING {_ENTRY_COLUMNS}
""")

# submitted_by / submitted_by_name are immutable after creation
_UPDATE_SQL = text(f"""
    UPDATE deposit_entries
    SET date = :date,
        local_deposit = :local_deposit,
        usdt_deposit = :usdt_deposit,
        cash_deposit = :cash_deposit,
        local_withdraw = :local_withdraw,
        usdt_withdraw = :usdt_withdraw,
        cash_withdraw = :cash_withdraw
    WHERE id = CAST(:id AS UUID)
    RETURNING {_ENTRY_COLUMNS}
""")

_DELETE_SQL = text("""
    DELETE FROM deposit_entries WHERE id = CAST(:deposit_id AS UUID)
""")

_INCENTIVES_SQL = text("""
    SELECT id, deposit_id, name, amount_cents
    FROM client_incentives
    WHERE deposit_id = ANY(:ids)
    ORDER BY position ASC
""").bindparams(bindparam("ids", type_=ARRAY(UUID(as_uuid=False))))

_EXPENSES_SQL = text("""
    SELECT id, deposit_id, type, amount_cents, description
    FROM expenses
    WHERE deposit_id = ANY(:ids)
    ORDER BY position ASC
""").bindparams(bindparam("ids", type_=ARRAY(UUID(as_uuid=False))))

_INSERT_INCENTIVE_SQL = text("""
    INSERT INTO client_incentives (deposit_id, position, name, amount_cents)
    VALUES (CAST(:deposit_id AS UUID), :position, :name, :amount_cents)
""")

_INSERT_EXPENSE_SQL = text("""
    INSERT INTO expenses (deposit_id, position, type, amount_cents, description)
    VALUES (CAST(:deposit_id AS UUID), :position, :type, :amount_cents, :description)
""")

_CLEAR_INCENTIVES_SQL = text("""
    DELETE FROM client_incentives WHERE deposit_id = CAST(:deposit_id AS UUID)
""")

_CLEAR_EXPENSES_SQL = text("""
    DELETE FROM expenses WHERE deposit_id = CAST(:deposit_id AS UUID)
""")


def _row_to_entry(row: object) -> DepositEntry:
    return DepositEntry(
        id=str(row.id),  # type: ignore[attr-defined]
        date=row.date,  # type: ignore[attr-defined]
        local_deposit=row.local_deposit,  # type: ignore[attr-defined]
        usdt_deposit=row.usdt_deposit,  # type: ignore[attr-defined]
        cash_deposit=row.cash_deposit,  # type: ignore[attr-defined]
        local_withdraw=row.local_withdraw,  # type: ignore[attr-defined]
        usdt_withdraw=row.usdt_withdraw,  # type: ignore[attr-defined]
        cash_withdraw=row.cash_withdraw,  # type: ignore[attr-defined]
        submitted_by=str(row.submitted_by),  # type: ignore[attr-defined]
        submitted_by_name=row.submitted_by_name,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _entry_params(entry: DepositEntry) -> dict[str, object]:
    return {
        "date": entry.date,
        "local_deposit": entry.local_deposit,
        "usdt_deposit": entry.usdt_deposit,
        "cash_deposit": entry.cash_deposit,
        "local_withdraw": entry.local_withdraw,
        "usdt_withdraw": entry.usdt_withdraw,
        "cash_withdraw": entry.cash_withdraw,
    }


class DepositRepository:
    async def _attach_children(self, db: AsyncSession, entries: list[DepositEntry]) -> None:
        if not entries:
            return
        ids = [e.id for e in entries]
        incentives: dict[str, list[ClientIncentive]] = defaultdict(list)
        for r in (await db.execute(_INCENTIVES_SQL, {"ids": ids})).fetchall():
            incentives[str(r.deposit_id)].append(
                ClientIncentive(id=str(r.id), name=r.name, amount_cents=r.amount_cents)
            )
        expenses: dict[str, list[Expense]] = defaultdict(list)
        for r in (await db.execute(_EXPENSES_SQL, {"ids": ids})).fetchall():
            expenses[str(r.deposit_id)].append(
                Expense(
                    id=str(r.id),
                    type=r.type,
                    amount_cents=r.amount_cents,
                    description=r.description,
                )
            )
        for e in entries:
            e.incentives = incentives.get(e.id, [])
            e.expenses = expenses.get(e.id, [])

    async def _write_children(self, db: AsyncSession, entry: DepositEntry) -> None:
        if entry.incentives:
            await db.execute(
                _INSERT_INCENTIVE_SQL,
                [
                    {
                        "deposit_id": entry.id,
                        "position": pos,
                        "name": i.name,
                        "amount_cents": i.amount_cents,
                    }
                    for pos, i in enumerate(entry.incentives)
                ],
            )
        if entry.expenses:
            await db.execute(
                _INSERT_EXPENSE_SQL,
                [
                    {
                        "deposit_id": entry.id,
                        "position": pos,
                        "type": x.type,
                        "amount_cents": x.amount_cents,
                        "description": x.description,
                    }
                    for pos, x in enumerate(entry.expenses)
                ],
            )

    async def list_entries(
        self,
        db: AsyncSession,
        submitted_by: str | None,
        date_from: date | None,
        date_to: date | None,
    ) -> list[DepositEntry]:
        result = await db.execute(
            _LIST_SQL,
            {"submitted_by": submitted_by, "date_from": date_from, "date_to": date_to},
        )
        entries = [_row_to_entry(r) for r in result.fetchall()]
        await self._attach_children(db, entries)
        return entries

    async def get(self, db: AsyncSession, deposit_id: str) -> DepositEntry | None:
        row = (await db.execute(_GET_SQL, {"deposit_id": deposit_id})).fetchone()
        if row is None:
            return None
        entry = _row_to_entry(row)
        await self._attach_children(db, [entry])
        return entry

    async def insert(self, db: AsyncSession, entry: DepositEntry) -> DepositEntry:
        row = (
            await db.execute(
                _INSERT_SQL,
                {
                    **_entry_params(entry),
                    "submitted_by": entry.submitted_by,
                    "submitted_by_name": entry.submitted_by_name,
                },
            )
        ).fetchone()
        if row is None:
            raise InternalError("Deposit insert returned no rows")
        saved = _row_to_entry(row)
        saved.incentives, saved.expenses = entry.incentives, entry.expenses
        await self._write_children(db, saved)
        await self._attach_children(db, [saved])
        return saved

    async def update(self, db: AsyncSession, entry: DepositEntry) -> DepositEntry | None:
        row = (
            await db.execute(_UPDATE_SQL, {**_entry_params(entry), "id": entry.id})
        ).fetchone()
        if row is None:
            return None
        saved = _row_to_entry(row)
        await db.execute(_CLEAR_INCENTIVES_SQL, {"deposit_id": entry.id})
        await db.execute(_CLEAR_EXPENSES_SQL, {"deposit_id": entry.id})
        saved.incentives, saved.expenses = entry.incentives, entry.expenses
        await self._write_children(db, saved)
        await self._attach_children(db, [saved])
        return saved

    async def delete(self, db: AsyncSession, deposit_id: str) -> bool:
        result = await db.execute(_DELETE_SQL, {"deposit_id": deposit_id})
        return (result.rowcount or 0) > 0
