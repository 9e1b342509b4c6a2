"""Store Credit Allocator

Issues new store credit: derives the credit type from the category,
validates the ledger, persists it and appends its allocation event in the
caller's transaction. Shared by CreateStoreCredit and CreditStoreCredit
(credit to a new allocation).
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional
from libs.result import Result, Return, Error
from src.app.repositories.store_credit_category_repository import (
    StoreCreditCategoryRepository,
    StoreCreditTypeRepository,
)
from src.app.repositories.store_credit_event_repository import StoreCreditEventRepository
from src.app.repositories.store_credit_repository import StoreCreditRepository
from src.app.services.ledger_writes import record_event
from src.app.services.store_credit_errors import ledger_error
from src.domain.store_credit import StoreCredit, to_decimal
from src.domain.store_credit_event import Originator, StoreCreditAction, StoreCreditEvent
from src.domain.store_credit_type import default_type_name

logger = logging.getLogger(__name__)


class StoreCreditAllocator:
    """
    Creates store credits together with their first event

    Does not commit; the calling use case owns the unit of work.
    """

    def __init__(
        self,
        store_credit_repo: StoreCreditRepository,
        event_repo: StoreCreditEventRepository,
        category_repo: StoreCreditCategoryRepository,
        type_repo: StoreCreditTypeRepository,
        non_expiring_categories: Iterable[str] = (),
    ):
        self.store_credit_repo = store_credit_repo
        self.event_repo = event_repo
        self.category_repo = category_repo
        self.type_repo = type_repo
        self.non_expiring_categories = list(non_expiring_categories)

    async def allocate(
        self,
        user_id: int,
        created_by_id: int,
        category_id: int,
        amount: Decimal,
        currency: str,
        type_id: Optional[int] = None,
        memo: Optional[str] = None,
        originator: Optional[Originator] = None,
        action: StoreCreditAction = StoreCreditAction.ALLOCATION,
        authorization_code: Optional[str] = None,
    ) -> Result[tuple[StoreCredit, StoreCreditEvent]]:
        """
        Persist a new store credit and its event

        Returns:
            Result[(StoreCredit, StoreCreditEvent)]: created ledger and event, or error

        Errors:
            STORE_CREDIT_TYPE_NOT_FOUND: Derived credit type does not exist
            STORE_CREDIT_CATEGORY_NOT_FOUND: Category does not exist
            AMOUNT_USED_CANNOT_BE_GREATER / AMOUNT_AUTHORIZED_EXCEEDS_TOTAL_CREDIT
        """
        # Step 1: Resolve the credit type; an explicit type is never overwritten
        if type_id is None:
            type_result = await self._default_type_id(category_id)
            if type_result.is_err():
                return type_result
            type_id = type_result.value

        store_credit = StoreCredit(
            user_id=user_id,
            created_by_id=created_by_id,
            category_id=category_id,
            type_id=type_id,
            amount=to_decimal(amount),
            amount_used=Decimal("0"),
            amount_authorized=Decimal("0"),
            currency=currency,
            memo=memo,
        )

        # Step 2: Structural invariants before persisting
        errors = store_credit.validation_errors()
        if errors:
            return Return.err(ledger_error(errors[0]))

        # Step 3: Serialize allocations for this user, then persist
        await self.store_credit_repo.lock_user(user_id)
        store_credit = await self.store_credit_repo.create(store_credit)

        # Step 4: Allocation event (user total includes the new credit)
        event = await record_event(
            self.store_credit_repo,
            self.event_repo,
            store_credit,
            action=action,
            amount=store_credit.amount,
            authorization_code=authorization_code or store_credit.generate_authorization_code(),
            originator=originator,
        )

        logger.info(
            f"Allocated store credit {store_credit.id} for user {user_id}: "
            f"{store_credit.amount} {currency} (type_id={type_id}, event={event.action})"
        )
        return Return.ok((store_credit, event))

    async def _default_type_id(self, category_id: int) -> Result[int]:
        category = await self.category_repo.get_by_id(category_id)
        if not category:
            return Return.err(
                Error(
                    code="STORE_CREDIT_CATEGORY_NOT_FOUND",
                    message=f"Store credit category {category_id} not found",
                )
            )

        type_name = default_type_name(category.is_non_expiring(self.non_expiring_categories))
        credit_type = await self.type_repo.get_by_name(type_name)
        if not credit_type:
            return Return.err(
                Error(
                    code="STORE_CREDIT_TYPE_NOT_FOUND",
                    message=f"Store credit type '{type_name}' not found",
                    reason=f"category={category.name}",
                )
            )
        return Return.ok(credit_type.id)
