"""AuthorizeStoreCredit Use Case

Places a hold on store credit for a payment. Holds reduce the remaining
amount until they are captured or voided.
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
from .dtos import AuthorizeCommandDTO, StoreCreditOperationResponseDTO

logger = logging.getLogger(__name__)


class AuthorizeStoreCredit:
    """
    Use Case: Hold store credit

    Business Rules:
    1. Currency must match the store credit currency
    2. Idempotency: an authorization_code of an existing authorize event
       returns that event without holding again
    3. Sufficient funds: amount <= amount_remaining
    4. Atomic updates: amount_authorized and event written in one transaction
    5. Pessimistic locking: SELECT FOR UPDATE prevents race conditions

    Flow:
    1. Get store credit with lock
    2. Validate currency
    3. Short-circuit on a known authorization code
    4. Validate sufficient funds
    5. Update amount_authorized, append authorize event
    6. Commit transaction
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

    async def execute(self, command: AuthorizeCommandDTO) -> Result[StoreCreditOperationResponseDTO]:
        """
        Execute authorization

        Args:
            command: AuthorizeCommandDTO with store_credit_id, amount, currency

        Returns:
            Result[StoreCreditOperationResponseDTO]: ledger snapshot and authorize event, or error
        """
        try:
            # Step 1: Get store credit with pessimistic lock (SELECT FOR UPDATE)
            store_credit = await self.store_credit_repo.get_by_id(
                command.store_credit_id, for_update=True
            )
            if not store_credit:
                return Return.err(not_found_error(command.store_credit_id))

            # Step 2: Validate currency
            if command.currency != store_credit.currency:
                return await self._reject(command, ledger_error(StoreCreditErrorCode.CURRENCY_MISMATCH))

            # Step 3: Already authorized with this code - nothing to do
            if command.authorization_code:
                existing_event = await self.event_repo.get_latest_by_authorization_code(
                    store_credit.id,
                    command.authorization_code,
                    action=StoreCreditAction.AUTHORIZE,
                )
                if existing_event:
                    # Build before rollback, rollback expires loaded entities
                    response = StoreCreditOperationResponseDTO.build(store_credit, existing_event)
                    await self.uow.rollback()
                    return Return.ok(response)

            # Step 4: Validate sufficient funds
            error_code = store_credit.authorization_error(command.amount, command.currency)
            if error_code:
                return await self._reject(command, ledger_error(error_code))

            # Step 5: Hold the amount and record the event
            amount = to_decimal(command.amount)
            error = await update_balances(
                self.store_credit_repo,
                store_credit,
                amount_used=to_decimal(store_credit.amount_used),
                amount_authorized=to_decimal(store_credit.amount_authorized) + amount,
            )
            if error:
                return await self._reject(command, error)

            event = await record_event(
                self.store_credit_repo,
                self.event_repo,
                store_credit,
                action=StoreCreditAction.AUTHORIZE,
                amount=amount,
                authorization_code=store_credit.generate_authorization_code(),
                originator=command.originator_domain(),
            )

            # Step 6: Commit transaction
            await self.uow.commit()

            logger.info(
                f"Authorized {amount} {store_credit.currency} on store credit {store_credit.id} "
                f"(code={event.authorization_code})"
            )
            return Return.ok(StoreCreditOperationResponseDTO.build(store_credit, event))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to authorize store credit {command.store_credit_id}: {e}")
            return Return.err(
                Error(
                    code="AUTHORIZE_STORE_CREDIT_FAILED",
                    message="Failed to authorize store credit",
                    reason=str(e),
                )
            )

    async def _reject(self, command: AuthorizeCommandDTO, error: Error) -> Result:
        await self.uow.rollback()
        logger.warning(
            f"Authorization of {command.amount} {command.currency} on store credit "
            f"{command.store_credit_id} rejected: {error.code}"
        )
        return Return.err(error)
