"""Unit of Work Interface

Transaction boundary for use cases. Repositories share the unit of work's
session; nothing is visible to other transactions until commit().
"""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
