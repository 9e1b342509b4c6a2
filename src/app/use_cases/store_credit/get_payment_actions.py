"""GetPaymentActions Use Case

Tells the payment processing side which store credit actions a payment
currently allows.
"""

from libs.result import Result, Return, Error
from src.app.services.store_credit_errors import not_found_error
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.store_credit_repository import StoreCreditRepository
from .dtos import PaymentActionsResponseDTO


class GetPaymentActions:
    """
    Use Case: can_capture / can_void / can_credit for a payment

    Business Rules:
    - capture: payment is pending or checkout
    - void: payment is pending (checkout payments cannot be voided)
    - credit: payment completed, order owes credit, payment has credit allowed
    """

    def __init__(self, store_credit_repo: StoreCreditRepository, payment_repo: PaymentRepository):
        self.store_credit_repo = store_credit_repo
        self.payment_repo = payment_repo

    async def execute(self, store_credit_id: int, response_code: str) -> Result[PaymentActionsResponseDTO]:
        store_credit = await self.store_credit_repo.get_by_id(store_credit_id)
        if not store_credit:
            return Return.err(not_found_error(store_credit_id))

        payment = await self.payment_repo.get_by_response_code(response_code)
        if not payment:
            return Return.err(
                Error(
                    code="PAYMENT_NOT_FOUND",
                    message=f"No payment found for response code {response_code}",
                )
            )

        order = await self.payment_repo.get_order(payment.order_id)

        return Return.ok(
            PaymentActionsResponseDTO(
                store_credit_id=store_credit.id,
                payment_id=payment.id,
                payment_state=payment.state,
                can_capture=store_credit.can_capture(payment),
                can_void=store_credit.can_void(payment),
                can_credit=store_credit.can_credit(payment, order),
            )
        )
