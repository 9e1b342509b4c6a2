"""CreditStoreCredit Use Case

Gives back (part of) a captured amount, either to the original store credit
or as a brand new store credit for the same user.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.ledger_writes import record_event, update_balances
from src.app.services.store_credit_allocator import StoreCreditAllocator
from src.app.services.store_credit_errors import ledger_error, not_found_error
from src.app.repositories.store_credit_repository import StoreCreditRepository
from src.app.repositories.store_credit_event_repository import StoreCreditEventRepository
from src.domain.errors import StoreCreditErrorCode
from src.domain.store_credit import StoreCredit, to_decimal
from src.domain.store_credit_event import StoreCreditAction
from .dtos import CreditCommandDTO, StoreCreditOperationResponseDTO

logger = logging.getLogger(__name__)

NEW_ALLOCATION_MEMO = "This is a credit from store credit ID {store_credit_id}"


class CreditStoreCredit:
    """
    Use Case: Credit captured store credit back

    Business Rules:
    1. Currency must match the store credit currency
    2. A capture event with the authorization code must exist, and all
       credits for the code together may not exceed the captured amount
    3. credit_to_new_allocation=True: a new store credit (same user, category,
       creator, currency and type) is issued for the amount, opened by a
       credit event carrying the capture's authorization code; the original
       store credit is left untouched
    4. Otherwise: amount_used -= amount on the original store credit and a
       credit event is appended to it
    5. The originator is recorded on whichever event is created

    Flow:
    1. Get store credit with lock
    2. Validate currency and capture event
    3. Credit to new allocation or to the existing store credit
    4. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        store_credit_repo: StoreCreditRepository,
        event_repo: StoreCreditEventRepository,
        allocator: StoreCreditAllocator,
        credit_to_new_allocation: bool = False,
    ):
        self.uow = uow
        self.store_credit_repo = store_credit_repo
        self.event_repo = event_repo
        self.allocator = allocator
        self.credit_to_new_allocation = credit_to_new_allocation

    async def execute(self, command: CreditCommandDTO) -> Result[StoreCreditOperationResponseDTO]:
        """
        Execute credit

        Args:
            command: CreditCommandDTO; command.credit_to_new_allocation overrides
                the configured default when set

        Returns:
            Result[StoreCreditOperationResponseDTO]: credited ledger and its event, or error
        """
        try:
            # Step 1: Get store credit with pessimistic lock (SELECT FOR UPDATE)
            store_credit = await self.store_credit_repo.get_by_id(
                command.store_credit_id, for_update=True
            )
            if not store_credit:
                return Return.err(not_found_error(command.store_credit_id))

            # Step 2: Validate currency and the capture being credited
            if command.currency != store_credit.currency:
                return await self._reject(command, ledger_error(StoreCreditErrorCode.CURRENCY_MISMATCH))

            amount = to_decimal(command.amount)
            capture_event = await self.event_repo.get_latest_by_authorization_code(
                store_credit.id,
                command.authorization_code,
                action=StoreCreditAction.CAPTURE,
            )
            if not capture_event:
                return await self._reject(
                    command, self._unable_to_credit(command, f"captured=None, requested={amount}")
                )

            # Credits already given back for this code, on any store credit
            already_credited = await self.event_repo.get_credited_amount(command.authorization_code)
            captured = to_decimal(capture_event.amount)
            if already_credited + amount > captured:
                return await self._reject(
                    command,
                    self._unable_to_credit(
                        command, f"captured={captured}, credited={already_credited}, requested={amount}"
                    ),
                )

            # Step 3: Credit
            to_new_allocation = command.credit_to_new_allocation
            if to_new_allocation is None:
                to_new_allocation = self.credit_to_new_allocation

            if to_new_allocation:
                result = await self._credit_to_new_allocation(store_credit, command)
            else:
                result = await self._credit_to_existing(store_credit, command)

            if result.is_err():
                return await self._reject(command, result.error)

            # Step 4: Commit transaction
            await self.uow.commit()

            credited = result.value
            logger.info(
                f"Credited {amount} {store_credit.currency} from store credit {store_credit.id} "
                f"to store credit {credited.store_credit.id} (code={command.authorization_code})"
            )
            return Return.ok(credited)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to credit store credit {command.store_credit_id}: {e}")
            return Return.err(
                Error(
                    code="CREDIT_STORE_CREDIT_FAILED",
                    message="Failed to credit store credit",
                    reason=str(e),
                )
            )

    async def _credit_to_new_allocation(
        self, store_credit: StoreCredit, command: CreditCommandDTO
    ) -> Result[StoreCreditOperationResponseDTO]:
        allocation = await self.allocator.allocate(
            user_id=store_credit.user_id,
            created_by_id=store_credit.created_by_id,
            category_id=store_credit.category_id,
            amount=to_decimal(command.amount),
            currency=store_credit.currency,
            type_id=store_credit.type_id,
            memo=NEW_ALLOCATION_MEMO.format(store_credit_id=store_credit.id),
            originator=command.originator_domain(),
            action=StoreCreditAction.CREDIT,
            authorization_code=command.authorization_code,
        )
        if allocation.is_err():
            return allocation

        new_store_credit, event = allocation.value
        return Return.ok(StoreCreditOperationResponseDTO.build(new_store_credit, event))

    async def _credit_to_existing(
        self, store_credit: StoreCredit, command: CreditCommandDTO
    ) -> Result[StoreCreditOperationResponseDTO]:
        amount = to_decimal(command.amount)
        amount_used = to_decimal(store_credit.amount_used)
        # amount_used may never go negative
        if amount > amount_used:
            return Return.err(
                self._unable_to_credit(command, f"amount_used={amount_used}, requested={amount}")
            )

        error = await update_balances(
            self.store_credit_repo,
            store_credit,
            amount_used=amount_used - amount,
            amount_authorized=to_decimal(store_credit.amount_authorized),
        )
        if error:
            return Return.err(error)

        event = await record_event(
            self.store_credit_repo,
            self.event_repo,
            store_credit,
            action=StoreCreditAction.CREDIT,
            amount=amount,
            authorization_code=command.authorization_code,
            originator=command.originator_domain(),
        )
        return Return.ok(StoreCreditOperationResponseDTO.build(store_credit, event))

    @staticmethod
    def _unable_to_credit(command: CreditCommandDTO, reason: str) -> Error:
        return ledger_error(
            StoreCreditErrorCode.UNABLE_TO_CREDIT,
            reason=reason,
            auth_code=command.authorization_code,
        )

    async def _reject(self, command: CreditCommandDTO, error: Error) -> Result:
        await self.uow.rollback()
        logger.warning(
            f"Credit of {command.amount} {command.currency} on store credit "
            f"{command.store_credit_id} rejected: {error.code}"
        )
        return Return.err(error)
