"""Store credit use cases"""
from .create_store_credit import CreateStoreCredit
from .authorize_store_credit import AuthorizeStoreCredit
from .capture_store_credit import CaptureStoreCredit
from .void_store_credit import VoidStoreCredit
from .credit_store_credit import CreditStoreCredit
from .validate_authorization import ValidateAuthorization
from .get_store_credit import GetStoreCredit
from .destroy_store_credit import DestroyStoreCredit
from .list_store_credit_events import ListStoreCreditEvents
from .get_event_order import GetEventOrder
from .get_payment_actions import GetPaymentActions
from .reconcile_store_credits import ReconcileStoreCredits
from .dtos import (
    OriginatorDTO,
    CreateStoreCreditCommandDTO,
    AuthorizeCommandDTO,
    CaptureCommandDTO,
    VoidCommandDTO,
    CreditCommandDTO,
    StoreCreditResponseDTO,
    StoreCreditEventDTO,
    StoreCreditOperationResponseDTO,
    ListStoreCreditEventsResponseDTO,
    PaymentActionsResponseDTO,
    EventOrderDTO,
    StoreCreditDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "CreateStoreCredit",
    "AuthorizeStoreCredit",
    "CaptureStoreCredit",
    "VoidStoreCredit",
    "CreditStoreCredit",
    "ValidateAuthorization",
    "GetStoreCredit",
    "DestroyStoreCredit",
    "ListStoreCreditEvents",
    "GetEventOrder",
    "GetPaymentActions",
    "ReconcileStoreCredits",
    "OriginatorDTO",
    "CreateStoreCreditCommandDTO",
    "AuthorizeCommandDTO",
    "CaptureCommandDTO",
    "VoidCommandDTO",
    "CreditCommandDTO",
    "StoreCreditResponseDTO",
    "StoreCreditEventDTO",
    "StoreCreditOperationResponseDTO",
    "ListStoreCreditEventsResponseDTO",
    "PaymentActionsResponseDTO",
    "EventOrderDTO",
    "StoreCreditDiscrepancyDTO",
    "ReconciliationResultDTO",
]
