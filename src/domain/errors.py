"""Store credit error codes

Named error conditions signalled by the store credit ledger. Translation
to user-facing text is done by the caller; the messages below are the
default English rendering.
"""

from enum import Enum


class StoreCreditErrorCode(str, Enum):
    """Named store credit error conditions"""
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    CURRENCY_MISMATCH = "CURRENCY_MISMATCH"
    INSUFFICIENT_AUTHORIZED_AMOUNT = "INSUFFICIENT_AUTHORIZED_AMOUNT"
    UNABLE_TO_VOID = "UNABLE_TO_VOID"
    UNABLE_TO_CREDIT = "UNABLE_TO_CREDIT"
    AMOUNT_USED_NOT_ZERO = "AMOUNT_USED_NOT_ZERO"
    AMOUNT_USED_CANNOT_BE_GREATER = "AMOUNT_USED_CANNOT_BE_GREATER"
    AMOUNT_AUTHORIZED_EXCEEDS_TOTAL_CREDIT = "AMOUNT_AUTHORIZED_EXCEEDS_TOTAL_CREDIT"


ERROR_MESSAGES = {
    StoreCreditErrorCode.INSUFFICIENT_FUNDS: "Store credit amount remaining is not sufficient",
    StoreCreditErrorCode.CURRENCY_MISMATCH: "Store credit currency does not match order currency",
    StoreCreditErrorCode.INSUFFICIENT_AUTHORIZED_AMOUNT: "Unable to capture more than authorized amount",
    StoreCreditErrorCode.UNABLE_TO_VOID: "Unable to void code: {auth_code}",
    StoreCreditErrorCode.UNABLE_TO_CREDIT: "Unable to credit code: {auth_code}",
    StoreCreditErrorCode.AMOUNT_USED_NOT_ZERO: "is greater than zero. Can not delete store credit",
    StoreCreditErrorCode.AMOUNT_USED_CANNOT_BE_GREATER: "cannot be greater than the credited amount",
    StoreCreditErrorCode.AMOUNT_AUTHORIZED_EXCEEDS_TOTAL_CREDIT: "exceeds total credit",
}

# Attribute an error is attached to, for the errors that belong to a field
ERROR_FIELDS = {
    StoreCreditErrorCode.AMOUNT_USED_NOT_ZERO: "amount_used",
    StoreCreditErrorCode.AMOUNT_USED_CANNOT_BE_GREATER: "amount_used",
    StoreCreditErrorCode.AMOUNT_AUTHORIZED_EXCEEDS_TOTAL_CREDIT: "amount_authorized",
}


def error_message(code: StoreCreditErrorCode, **params) -> str:
    return ERROR_MESSAGES[code].format(**params)
