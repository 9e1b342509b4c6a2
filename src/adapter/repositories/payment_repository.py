"""SQLAlchemy implementation of PaymentRepository"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.payment import Order, Payment


class SqlAlchemyPaymentRepository(PaymentRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_response_code(self, response_code: str) -> Optional[Payment]:
        stmt = (
            select(Payment)
            .where(Payment.response_code == response_code)
            .order_by(Payment.id.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_order(self, order_id: int) -> Optional[Order]:
        stmt = select(Order).where(Order.id == order_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
