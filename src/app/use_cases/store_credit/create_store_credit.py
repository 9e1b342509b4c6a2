"""CreateStoreCredit Use Case

Issues store credit to a user. The credit type is derived from the category
and an allocation event is appended in the same transaction.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.store_credit_allocator import StoreCreditAllocator
from .dtos import CreateStoreCreditCommandDTO, StoreCreditOperationResponseDTO

logger = logging.getLogger(__name__)


class CreateStoreCredit:
    """
    Use Case: Issue store credit

    Business Rules:
    1. Credit type: explicit type_id wins; otherwise "Non-expiring" for
       non-expiring categories and "Expiring" for everything else
    2. Invariants: amount_used <= amount, amount_authorized <= amount
    3. Atomic: ledger and allocation event committed together
    4. user_total_amount on the event includes the new credit

    Flow:
    1. Allocate (type resolution, validation, per-user lock, persist, event)
    2. Commit transaction
    3. Return response
    """

    def __init__(self, uow: UnitOfWork, allocator: StoreCreditAllocator):
        self.uow = uow
        self.allocator = allocator

    async def execute(self, command: CreateStoreCreditCommandDTO) -> Result[StoreCreditOperationResponseDTO]:
        """
        Execute store credit issuance

        Args:
            command: CreateStoreCreditCommandDTO

        Returns:
            Result[StoreCreditOperationResponseDTO]: created ledger and its event, or error
        """
        try:
            # Step 1: Allocate ledger and event
            allocation = await self.allocator.allocate(
                user_id=command.user_id,
                created_by_id=command.created_by_id,
                category_id=command.category_id,
                amount=command.amount,
                currency=command.currency,
                type_id=command.type_id,
                memo=command.memo,
                originator=command.originator_domain(),
                action=command.action,
                authorization_code=command.action_authorization_code,
            )
            if allocation.is_err():
                await self.uow.rollback()
                logger.warning(
                    f"Store credit for user {command.user_id} rejected: {allocation.error.code}"
                )
                return allocation

            store_credit, event = allocation.value

            # Step 2: Commit transaction
            await self.uow.commit()

            return Return.ok(StoreCreditOperationResponseDTO.build(store_credit, event))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create store credit for user {command.user_id}: {e}")
            return Return.err(
                Error(
                    code="CREATE_STORE_CREDIT_FAILED",
                    message="Failed to create store credit",
                    reason=str(e),
                )
            )
