"""Repository Protocols for banks and bank transactions (mocked in unit tests)."""

from datetime import date
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bo_bank.domain.models import Bank, BankTransaction


class BankRepositoryProtocol(Protocol):
    async def list_banks(self, db: AsyncSession) -> list[Bank]: ...

    async def count(self, db: AsyncSession) -> int: ...

    async def get(self, db: AsyncSession, bank_id: str) -> Bank | None: ...

    async def find_by_name(
        self, db: AsyncSession, name: str, exclude_id: str | None = None
    ) -> Bank | None: ...

    async def insert(
        self, db: AsyncSession, name: str, created_by: str, created_by_name: str
    ) -> Bank: ...

    async def rename(self, db: AsyncSession, bank_id: str, name: str) -> Bank | None: ...

    async def delete(self, db: AsyncSession, bank_id: str) -> bool: ...

    async def count_transactions(self, db: AsyncSession, bank_id: str) -> int: ...


class BankTransactionRepositoryProtocol(Protocol):
    async def list_transactions(
        self,
        db: AsyncSession,
        submitted_by: str | None,
        bank_id: str | None,
        date_from: date | None,
        date_to: date | None,
    ) -> list[BankTransaction]: ...

    async def get(self, db: AsyncSession, transaction_id: str) -> BankTransaction | None: ...

    async def previous_balance(
        self,
        db: AsyncSession,
        bank_id: str,
        before: date,
        exclude_id: str | None = None,
    ) -> int: ...

    async def insert(self, db: AsyncSession, txn: BankTransaction) -> BankTransaction: ...

    async def update(self, db: AsyncSession, txn: BankTransaction) -> BankTransaction | None: ...

    async def delete(self, db: AsyncSession, transaction_id: str) -> bool: ...
