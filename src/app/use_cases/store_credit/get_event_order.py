"""GetEventOrder Use Case

Resolves the order a store credit event was used for: the order of the
payment whose response_code equals the event's authorization code. Only
capture events are resolved; other events sharing the code did not pay for
the order.
"""

from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.store_credit_event_repository import StoreCreditEventRepository
from src.domain.store_credit_event import StoreCreditAction
from .dtos import EventOrderDTO


class GetEventOrder:

    def __init__(self, event_repo: StoreCreditEventRepository, payment_repo: PaymentRepository):
        self.event_repo = event_repo
        self.payment_repo = payment_repo

    async def execute(self, event_id: int) -> Result[Optional[EventOrderDTO]]:
        """
        Returns:
            Result[Optional[EventOrderDTO]]: ok(None) for non-capture events and when
                no payment carries the code
        """
        event = await self.event_repo.get_by_id(event_id)
        if not event:
            return Return.err(
                Error(
                    code="STORE_CREDIT_EVENT_NOT_FOUND",
                    message=f"Store credit event {event_id} not found",
                )
            )

        if StoreCreditAction(event.action) != StoreCreditAction.CAPTURE:
            return Return.ok(None)

        payment = await self.payment_repo.get_by_response_code(event.authorization_code)
        if not payment:
            return Return.ok(None)

        order = await self.payment_repo.get_order(payment.order_id)
        if not order:
            return Return.ok(None)

        return Return.ok(
            EventOrderDTO(
                order_id=order.id,
                number=order.number,
                payment_state=order.payment_state,
                payment_id=payment.id,
            )
        )
