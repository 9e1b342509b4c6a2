"""Store credit ledger writes

Every successful ledger mutation goes through update_balances() (invariants
checked before anything is written) and ends by appending exactly one event
through record_event().
"""

from decimal import Decimal
from typing import Optional
from libs.result import Error
from src.app.repositories.store_credit_event_repository import StoreCreditEventRepository
from src.app.repositories.store_credit_repository import StoreCreditRepository
from src.app.services.store_credit_errors import ledger_error
from src.domain.store_credit import StoreCredit, validate_amounts
from src.domain.store_credit_event import Originator, StoreCreditAction, StoreCreditEvent


async def update_balances(
    store_credit_repo: StoreCreditRepository,
    store_credit: StoreCredit,
    amount_used: Decimal,
    amount_authorized: Decimal,
) -> Optional[Error]:
    """
    Write new used/authorized amounts to a locked store credit

    Returns:
        Error for the first violated invariant (nothing written), None on success
    """
    errors = validate_amounts(store_credit.amount, amount_used, amount_authorized)
    if errors:
        return ledger_error(errors[0])

    store_credit.amount_used = amount_used
    store_credit.amount_authorized = amount_authorized
    await store_credit_repo.update_amounts(store_credit.id, amount_used, amount_authorized)
    return None


async def record_event(
    store_credit_repo: StoreCreditRepository,
    event_repo: StoreCreditEventRepository,
    store_credit: StoreCredit,
    action: StoreCreditAction,
    amount: Decimal,
    authorization_code: str,
    originator: Optional[Originator] = None,
) -> StoreCreditEvent:
    """
    Append an event for a store credit

    user_total_amount is read inside the caller's transaction. Ledger
    amounts never change after creation, so the total only moves on
    allocation, which holds the per-user lock.
    """
    user_total_amount = await store_credit_repo.get_user_total_amount(store_credit.user_id)

    event = StoreCreditEvent(
        store_credit_id=store_credit.id,
        action=action,
        amount=amount,
        user_total_amount=user_total_amount,
        authorization_code=authorization_code,
        originator_type=originator.type if originator else None,
        originator_id=originator.id if originator else None,
    )
    return await event_repo.create(event)
