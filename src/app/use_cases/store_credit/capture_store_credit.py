"""CaptureStoreCredit Use Case

Turns (part of) an authorization hold into used store credit.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.ledger_writes import record_event, update_balances
from src.app.services.store_credit_errors import ledger_error, not_found_error
from src.app.repositories.store_credit_repository import StoreCreditRepository
from src.app.repositories.store_credit_event_repository import StoreCreditEventRepository
from src.domain.errors import StoreCreditErrorCode
from src.domain.store_credit import to_decimal
from src.domain.store_credit_event import StoreCreditAction
from .dtos import CaptureCommandDTO, StoreCreditOperationResponseDTO

logger = logging.getLogger(__name__)


class CaptureStoreCredit:
    """
    Use Case: Capture held store credit

    Business Rules:
    1. Currency must match the store credit currency
    2. amount <= amount_authorized
    3. amount_authorized -= amount, amount_used += amount
    4. Capture event carries the authorization code being captured

    Flow:
    1. Get store credit with lock
    2. Validate currency and authorized amount
    3. Move amount from authorized to used, append capture event
    4. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        store_credit_repo: StoreCreditRepository,
        event_repo: StoreCreditEventRepository,
    ):
        self.uow = uow
        self.store_credit_repo = store_credit_repo
        self.event_repo = event_repo

    async def execute(self, command: CaptureCommandDTO) -> Result[StoreCreditOperationResponseDTO]:
        try:
            # Step 1: Get store credit with pessimistic lock (SELECT FOR UPDATE)
            store_credit = await self.store_credit_repo.get_by_id(
                command.store_credit_id, for_update=True
            )
            if not store_credit:
                return Return.err(not_found_error(command.store_credit_id))

            # Step 2: Validate currency and authorized amount
            if command.currency != store_credit.currency:
                return await self._reject(command, ledger_error(StoreCreditErrorCode.CURRENCY_MISMATCH))

            amount = to_decimal(command.amount)
            amount_authorized = to_decimal(store_credit.amount_authorized)
            if amount > amount_authorized:
                return await self._reject(
                    command,
                    ledger_error(
                        StoreCreditErrorCode.INSUFFICIENT_AUTHORIZED_AMOUNT,
                        reason=f"authorized={amount_authorized}, requested={amount}",
                    ),
                )

            # Step 3: Move the amount from the hold to used
            error = await update_balances(
                self.store_credit_repo,
                store_credit,
                amount_used=to_decimal(store_credit.amount_used) + amount,
                amount_authorized=amount_authorized - amount,
            )
            if error:
                return await self._reject(command, error)

            event = await record_event(
                self.store_credit_repo,
                self.event_repo,
                store_credit,
                action=StoreCreditAction.CAPTURE,
                amount=amount,
                authorization_code=command.authorization_code,
                originator=command.originator_domain(),
            )

            # Step 4: Commit transaction
            await self.uow.commit()

            logger.info(
                f"Captured {amount} {store_credit.currency} on store credit {store_credit.id} "
                f"(code={command.authorization_code})"
            )
            return Return.ok(StoreCreditOperationResponseDTO.build(store_credit, event))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to capture store credit {command.store_credit_id}: {e}")
            return Return.err(
                Error(
                    code="CAPTURE_STORE_CREDIT_FAILED",
                    message="Failed to capture store credit",
                    reason=str(e),
                )
            )

    async def _reject(self, command: CaptureCommandDTO, error: Error) -> Result:
        await self.uow.rollback()
        logger.warning(
            f"Capture of {command.amount} {command.currency} on store credit "
            f"{command.store_credit_id} rejected: {error.code}"
        )
        return Return.err(error)
