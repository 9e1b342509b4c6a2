from .base import BaseModel
from .errors import StoreCreditErrorCode
from .payment import Order, OrderPaymentState, Payment, PaymentState
from .store_credit import StoreCredit
from .store_credit_category import StoreCreditCategory
from .store_credit_event import Originator, StoreCreditAction, StoreCreditEvent
from .store_credit_type import StoreCreditType

__all__ = [
    "BaseModel",
    "StoreCreditErrorCode",
    "Order",
    "OrderPaymentState",
    "Payment",
    "PaymentState",
    "StoreCredit",
    "StoreCreditCategory",
    "Originator",
    "StoreCreditAction",
    "StoreCreditEvent",
    "StoreCreditType",
]
