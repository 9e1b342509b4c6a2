"""Store Credit Repository Interface

Defines the contract for store credit (ledger) persistence operations.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional
from src.domain.store_credit import StoreCredit


class StoreCreditRepository(ABC):
    """
    Repository interface for StoreCredit persistence

    Balance mutations must run on a ledger fetched with for_update=True
    (SELECT FOR UPDATE) so concurrent operations on one ledger serialize.
    Soft-deleted ledgers are never returned.
    """

    @abstractmethod
    async def get_by_id(self, store_credit_id: int, for_update: bool = False) -> Optional[StoreCredit]:
        """
        Retrieve store credit by ID

        Args:
            store_credit_id: Store credit ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            StoreCredit if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[StoreCredit]:
        """Retrieve all live store credits"""
        pass

    @abstractmethod
    async def create(self, store_credit: StoreCredit) -> StoreCredit:
        """
        Create a new store credit

        Args:
            store_credit: StoreCredit entity to persist

        Returns:
            Created StoreCredit with generated ID
        """
        pass

    @abstractmethod
    async def update_amounts(
        self, store_credit_id: int, amount_used: Decimal, amount_authorized: Decimal
    ) -> None:
        """
        Update used and authorized amounts

        Should be called within a transaction with the ledger already locked.
        """
        pass

    @abstractmethod
    async def soft_delete(self, store_credit_id: int) -> None:
        pass

    @abstractmethod
    async def lock_user(self, user_id: int) -> None:
        """
        Serialize allocations for a user until the transaction ends

        Held while computing a user's total so that concurrent allocations
        never compute the same pre-update total.
        """
        pass

    @abstractmethod
    async def get_user_total_amount(self, user_id: int) -> Decimal:
        """Sum of amount across the user's live store credits"""
        pass
