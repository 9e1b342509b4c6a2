"""Store Credit Event Repository Interface

Events are immutable and append-only; there is no update or delete.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from src.domain.store_credit_event import StoreCreditAction, StoreCreditEvent


class StoreCreditEventRepository(ABC):

    @abstractmethod
    async def create(self, event: StoreCreditEvent) -> StoreCreditEvent:
        """
        Append a new event

        Args:
            event: StoreCreditEvent entity to persist

        Returns:
            Created StoreCreditEvent with generated ID
        """
        pass

    @abstractmethod
    async def get_by_id(self, event_id: int) -> Optional[StoreCreditEvent]:
        pass

    @abstractmethod
    async def get_latest_by_authorization_code(
        self,
        store_credit_id: int,
        authorization_code: str,
        action: Optional[StoreCreditAction] = None,
    ) -> Optional[StoreCreditEvent]:
        """
        Most recent event of a store credit carrying the authorization code

        Args:
            store_credit_id: Store credit ID
            authorization_code: Code to match
            action: Restrict the lookup to this action when given

        Returns:
            StoreCreditEvent if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_store_credit_id(
        self, store_credit_id: int, limit: int = 20, offset: int = 0
    ) -> Tuple[List[StoreCreditEvent], int]:
        """
        Paginated events of a store credit, newest first

        Returns:
            Tuple of (list of StoreCreditEvent, total count)
        """
        pass

    @abstractmethod
    async def get_action_sums(self, store_credit_id: int) -> Dict[StoreCreditAction, Decimal]:
        """Sum of event amounts per action for a store credit"""
        pass

    @abstractmethod
    async def get_creation_event(self, store_credit_id: int) -> Optional[StoreCreditEvent]:
        """First event of a store credit, written when it was issued"""
        pass

    @abstractmethod
    async def get_credited_amount(self, authorization_code: str) -> Decimal:
        """
        Total of credit events carrying the authorization code

        Spans all store credits, so credits issued as new allocations count
        against the capture they came from.
        """
        pass
