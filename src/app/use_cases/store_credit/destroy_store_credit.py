"""DestroyStoreCredit Use Case

Removes a store credit that was never used. The ledger is soft deleted so
its event history stays intact.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.store_credit_errors import ledger_error, not_found_error
from src.app.repositories.store_credit_repository import StoreCreditRepository

logger = logging.getLogger(__name__)


class DestroyStoreCredit:
    """
    Use Case: Delete store credit

    Business Rules:
    1. A store credit with amount_used > 0 cannot be deleted
       (AMOUNT_USED_NOT_ZERO on amount_used)
    2. Deleted store credits no longer count towards the user's total
    """

    def __init__(self, uow: UnitOfWork, store_credit_repo: StoreCreditRepository):
        self.uow = uow
        self.store_credit_repo = store_credit_repo

    async def execute(self, store_credit_id: int) -> Result[int]:
        """
        Returns:
            Result[int]: id of the deleted store credit, or error
        """
        try:
            store_credit = await self.store_credit_repo.get_by_id(store_credit_id, for_update=True)
            if not store_credit:
                return Return.err(not_found_error(store_credit_id))

            error_code = store_credit.destroy_error()
            if error_code:
                logger.warning(
                    f"Refusing to delete store credit {store_credit_id}: "
                    f"amount_used={store_credit.amount_used}"
                )
                await self.uow.rollback()
                return Return.err(ledger_error(error_code))

            await self.store_credit_repo.soft_delete(store_credit_id)
            await self.uow.commit()

            logger.info(f"Deleted store credit {store_credit_id}")
            return Return.ok(store_credit_id)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DESTROY_STORE_CREDIT_FAILED",
                    message="Failed to delete store credit",
                    reason=str(e),
                )
            )
