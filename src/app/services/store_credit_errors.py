"""Conversion of store credit error codes into use case errors"""

from typing import Optional
from libs.result import Error
from src.domain.errors import ERROR_FIELDS, StoreCreditErrorCode, error_message


def ledger_error(code: StoreCreditErrorCode, reason: Optional[str] = None, **params) -> Error:
    """
    Build the Error for a named store credit condition

    Field-level errors (amount_used, amount_authorized) carry the field name
    as reason unless a reason is given.
    """
    return Error(
        code=code.value,
        message=error_message(code, **params),
        reason=reason or ERROR_FIELDS.get(code),
    )


def not_found_error(store_credit_id: int) -> Error:
    return Error(
        code="STORE_CREDIT_NOT_FOUND",
        message=f"Store credit {store_credit_id} not found",
        reason="Store credit may not exist or has been deleted",
    )
