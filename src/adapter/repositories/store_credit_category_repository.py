"""SQLAlchemy implementations of the category and type repositories"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.store_credit_category_repository import (
    StoreCreditCategoryRepository,
    StoreCreditTypeRepository,
)
from src.domain.store_credit_category import StoreCreditCategory
from src.domain.store_credit_type import StoreCreditType


class SqlAlchemyStoreCreditCategoryRepository(StoreCreditCategoryRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, category_id: int) -> Optional[StoreCreditCategory]:
        stmt = select(StoreCreditCategory).where(StoreCreditCategory.id == category_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()


class SqlAlchemyStoreCreditTypeRepository(StoreCreditTypeRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, type_id: int) -> Optional[StoreCreditType]:
        stmt = select(StoreCreditType).where(StoreCreditType.id == type_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[StoreCreditType]:
        stmt = select(StoreCreditType).where(StoreCreditType.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
