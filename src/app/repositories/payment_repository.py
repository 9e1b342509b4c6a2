"""Payment Repository Interface

Read-only lookups into the order platform's payments and orders.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.payment import Order, Payment


class PaymentRepository(ABC):

    @abstractmethod
    async def get_by_response_code(self, response_code: str) -> Optional[Payment]:
        """
        Find the payment whose response_code equals the given code

        Args:
            response_code: Gateway response code (store credit authorization code)

        Returns:
            Payment if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_order(self, order_id: int) -> Optional[Order]:
        pass
