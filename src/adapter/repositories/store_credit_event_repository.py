"""SQLAlchemy implementation of StoreCreditEventRepository

Events are only ever inserted; lookups by authorization code always pick
the most recent matching event so callers see the causal order
authorize -> capture -> credit / void.
"""

from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.store_credit_event_repository import StoreCreditEventRepository
from src.domain.store_credit_event import StoreCreditAction, StoreCreditEvent


class SqlAlchemyStoreCreditEventRepository(StoreCreditEventRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, event: StoreCreditEvent) -> StoreCreditEvent:
        self.session.add(event)
        await self.session.flush()
        await self.session.refresh(event)
        return event

    async def get_by_id(self, event_id: int) -> Optional[StoreCreditEvent]:
        stmt = select(StoreCreditEvent).where(StoreCreditEvent.id == event_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_latest_by_authorization_code(
        self,
        store_credit_id: int,
        authorization_code: str,
        action: Optional[StoreCreditAction] = None,
    ) -> Optional[StoreCreditEvent]:
        stmt = select(StoreCreditEvent).where(
            StoreCreditEvent.store_credit_id == store_credit_id,
            StoreCreditEvent.authorization_code == authorization_code,
        )
        if action is not None:
            stmt = stmt.where(StoreCreditEvent.action == action)

        # id breaks ties between events created within the same timestamp
        stmt = stmt.order_by(StoreCreditEvent.created_at.desc(), StoreCreditEvent.id.desc()).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_store_credit_id(
        self, store_credit_id: int, limit: int = 20, offset: int = 0
    ) -> Tuple[List[StoreCreditEvent], int]:
        """
        Paginated events of a store credit

        Returns:
            Tuple of (list of StoreCreditEvent, total count)
        """
        # Get total count
        count_stmt = select(func.count()).select_from(StoreCreditEvent).where(
            StoreCreditEvent.store_credit_id == store_credit_id
        )
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar()

        stmt = (
            select(StoreCreditEvent)
            .where(StoreCreditEvent.store_credit_id == store_credit_id)
            .order_by(StoreCreditEvent.created_at.desc(), StoreCreditEvent.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_action_sums(self, store_credit_id: int) -> Dict[StoreCreditAction, Decimal]:
        stmt = (
            select(StoreCreditEvent.action, func.sum(StoreCreditEvent.amount))
            .where(StoreCreditEvent.store_credit_id == store_credit_id)
            .group_by(StoreCreditEvent.action)
        )
        result = await self.session.execute(stmt)
        sums = {action: Decimal("0") for action in StoreCreditAction}
        for action, total in result.all():
            sums[StoreCreditAction(action)] = Decimal(str(total or 0))
        return sums

    async def get_creation_event(self, store_credit_id: int) -> Optional[StoreCreditEvent]:
        stmt = (
            select(StoreCreditEvent)
            .where(StoreCreditEvent.store_credit_id == store_credit_id)
            .order_by(StoreCreditEvent.created_at.asc(), StoreCreditEvent.id.asc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_credited_amount(self, authorization_code: str) -> Decimal:
        stmt = select(func.sum(StoreCreditEvent.amount)).where(
            StoreCreditEvent.authorization_code == authorization_code,
            StoreCreditEvent.action == StoreCreditAction.CREDIT,
        )
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar() or 0))
