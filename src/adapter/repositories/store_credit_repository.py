"""SQLAlchemy implementation of StoreCreditRepository

Provides persistence for StoreCredit entities with pessimistic locking support
to prevent lost updates during concurrent authorize/capture/void/credit calls.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import func, text
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.store_credit_repository import StoreCreditRepository
from src.domain.store_credit import StoreCredit

# Namespace for per-user advisory locks (first key of pg_advisory_xact_lock)
USER_LOCK_NAMESPACE = 7311


class SqlAlchemyStoreCreditRepository(StoreCreditRepository):
    """
    SQLAlchemy implementation of StoreCreditRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Per-user transaction-scoped advisory locks on PostgreSQL
    - Soft delete via deleted_at
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, store_credit_id: int, for_update: bool = False) -> Optional[StoreCredit]:
        """
        Retrieve store credit by ID with optional row-level locking

        Args:
            store_credit_id: Store credit ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            StoreCredit if found, None otherwise
        """
        stmt = select(StoreCredit).where(
            StoreCredit.id == store_credit_id,
            StoreCredit.deleted_at.is_(None),
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(self) -> List[StoreCredit]:
        stmt = select(StoreCredit).where(StoreCredit.deleted_at.is_(None)).order_by(StoreCredit.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, store_credit: StoreCredit) -> StoreCredit:
        self.session.add(store_credit)
        await self.session.flush()
        await self.session.refresh(store_credit)
        return store_credit

    async def update_amounts(
        self, store_credit_id: int, amount_used: Decimal, amount_authorized: Decimal
    ) -> None:
        """
        Update used/authorized amounts and updated_at timestamp

        Note:
            Should be called within a transaction with the ledger already locked
        """
        store_credit = await self.get_by_id(store_credit_id, for_update=False)
        if store_credit:
            store_credit.amount_used = amount_used
            store_credit.amount_authorized = amount_authorized
            store_credit.updated_at = datetime.utcnow()
            self.session.add(store_credit)
            await self.session.flush()

    async def soft_delete(self, store_credit_id: int) -> None:
        store_credit = await self.get_by_id(store_credit_id, for_update=False)
        if store_credit:
            store_credit.deleted_at = datetime.utcnow()
            self.session.add(store_credit)
            await self.session.flush()

    async def lock_user(self, user_id: int) -> None:
        """
        Take a transaction-scoped advisory lock for the user

        Only PostgreSQL supports advisory locks. SQLite serializes writers
        at the database level, so there is nothing to do there.
        """
        if self.session.bind.dialect.name != "postgresql":
            return
        await self.session.execute(
            text("SELECT pg_advisory_xact_lock(:namespace, :user_id)"),
            {"namespace": USER_LOCK_NAMESPACE, "user_id": user_id},
        )

    async def get_user_total_amount(self, user_id: int) -> Decimal:
        stmt = select(func.coalesce(func.sum(StoreCredit.amount), 0)).where(
            StoreCredit.user_id == user_id,
            StoreCredit.deleted_at.is_(None),
        )
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar_one()))
