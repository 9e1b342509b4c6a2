"""VoidStoreCredit Use Case

Releases an authorization hold that was never captured.
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
from .dtos import VoidCommandDTO, StoreCreditOperationResponseDTO

logger = logging.getLogger(__name__)


class VoidStoreCredit:
    """
    Use Case: Void an authorization

    Business Rules:
    1. The most recent event with the authorization code decides
    2. Only an authorize event can be voided; a captured amount can only
       be credited and a voided hold cannot be voided again
    3. The hold must still be covered by amount_authorized
    4. amount_authorized -= authorized amount

    Flow:
    1. Get store credit with lock
    2. Look up latest event for the code
    3. Release the hold, append void event
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

    async def execute(self, command: VoidCommandDTO) -> Result[StoreCreditOperationResponseDTO]:
        try:
            # Step 1: Get store credit with pessimistic lock (SELECT FOR UPDATE)
            store_credit = await self.store_credit_repo.get_by_id(
                command.store_credit_id, for_update=True
            )
            if not store_credit:
                return Return.err(not_found_error(command.store_credit_id))

            # Step 2: Latest event for the code must be the authorization itself
            auth_event = await self.event_repo.get_latest_by_authorization_code(
                store_credit.id, command.authorization_code
            )
            if not auth_event or StoreCreditAction(auth_event.action) != StoreCreditAction.AUTHORIZE:
                found = StoreCreditAction(auth_event.action).value if auth_event else "none"
                return await self._reject(
                    command,
                    ledger_error(
                        StoreCreditErrorCode.UNABLE_TO_VOID,
                        reason=f"latest_event={found}",
                        auth_code=command.authorization_code,
                    ),
                )

            # The hold may already have been consumed by a capture under another code
            amount_authorized = to_decimal(store_credit.amount_authorized)
            if to_decimal(auth_event.amount) > amount_authorized:
                return await self._reject(
                    command,
                    ledger_error(
                        StoreCreditErrorCode.UNABLE_TO_VOID,
                        reason=f"authorized={amount_authorized}, hold={auth_event.amount}",
                        auth_code=command.authorization_code,
                    ),
                )

            # Step 3: Release the hold
            error = await update_balances(
                self.store_credit_repo,
                store_credit,
                amount_used=to_decimal(store_credit.amount_used),
                amount_authorized=amount_authorized - to_decimal(auth_event.amount),
            )
            if error:
                return await self._reject(command, error)

            event = await record_event(
                self.store_credit_repo,
                self.event_repo,
                store_credit,
                action=StoreCreditAction.VOID,
                amount=auth_event.amount,
                authorization_code=command.authorization_code,
                originator=command.originator_domain(),
            )

            # Step 4: Commit transaction
            await self.uow.commit()

            logger.info(
                f"Voided {auth_event.amount} {store_credit.currency} on store credit {store_credit.id} "
                f"(code={command.authorization_code})"
            )
            return Return.ok(StoreCreditOperationResponseDTO.build(store_credit, event))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to void store credit {command.store_credit_id}: {e}")
            return Return.err(
                Error(
                    code="VOID_STORE_CREDIT_FAILED",
                    message="Failed to void store credit",
                    reason=str(e),
                )
            )

    async def _reject(self, command: VoidCommandDTO, error: Error) -> Result:
        await self.uow.rollback()
        logger.warning(
            f"Void of code {command.authorization_code} on store credit "
            f"{command.store_credit_id} rejected: {error.code}"
        )
        return Return.err(error)
