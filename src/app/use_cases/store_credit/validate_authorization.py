"""ValidateAuthorization Use Case

Pre-flight check for an authorization. Never changes the store credit.
"""

from decimal import Decimal
from libs.result import Result, Return
from src.app.services.store_credit_errors import ledger_error, not_found_error
from src.app.repositories.store_credit_repository import StoreCreditRepository


class ValidateAuthorization:
    """
    Use Case: Check whether an authorization would succeed

    Same currency and sufficient-funds rules as AuthorizeStoreCredit.
    """

    def __init__(self, store_credit_repo: StoreCreditRepository):
        self.store_credit_repo = store_credit_repo

    async def execute(self, store_credit_id: int, amount: Decimal, currency: str) -> Result[bool]:
        """
        Returns:
            Result[bool]: ok(True) when the amount can be authorized

        Errors:
            STORE_CREDIT_NOT_FOUND, CURRENCY_MISMATCH, INSUFFICIENT_FUNDS
        """
        store_credit = await self.store_credit_repo.get_by_id(store_credit_id)
        if not store_credit:
            return Return.err(not_found_error(store_credit_id))

        error_code = store_credit.authorization_error(amount, currency)
        if error_code:
            return Return.err(ledger_error(error_code))

        return Return.ok(True)
