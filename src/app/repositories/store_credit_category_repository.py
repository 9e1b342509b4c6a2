"""Store Credit Category and Type Repository Interfaces"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.store_credit_category import StoreCreditCategory
from src.domain.store_credit_type import StoreCreditType


class StoreCreditCategoryRepository(ABC):

    @abstractmethod
    async def get_by_id(self, category_id: int) -> Optional[StoreCreditCategory]:
        pass


class StoreCreditTypeRepository(ABC):

    @abstractmethod
    async def get_by_id(self, type_id: int) -> Optional[StoreCreditType]:
        pass

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[StoreCreditType]:
        pass
