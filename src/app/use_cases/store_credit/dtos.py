"""Data Transfer Objects for Store Credit Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from src.domain.store_credit import StoreCredit
from src.domain.store_credit_event import Originator, StoreCreditAction, StoreCreditEvent


class OriginatorDTO(BaseModel):
    """Actor that caused an event (order, payment, admin user, ...)"""

    type: str = Field(..., description="Originator kind (e.g. 'Payment', 'AdminUser')")
    id: str = Field(..., description="Originator identifier")

    def to_domain(self) -> Originator:
        return Originator(type=self.type, id=self.id)


def _originator(dto: Optional[OriginatorDTO]) -> Optional[Originator]:
    return dto.to_domain() if dto else None


class CreateStoreCreditCommandDTO(BaseModel):
    """
    Command DTO for issuing store credit

    Used as input to CreateStoreCredit use case.
    """

    user_id: int = Field(..., description="User receiving the credit")

    created_by_id: int = Field(..., description="Admin user issuing the credit")

    category_id: int = Field(..., description="Store credit category")

    amount: Decimal = Field(..., gt=0, description="Credited amount (must be > 0)")

    currency: str = Field(..., min_length=3, max_length=3, description="ISO currency code")

    type_id: Optional[int] = Field(
        default=None,
        description="Credit type; derived from the category when omitted"
    )

    memo: Optional[str] = Field(default=None, max_length=255)

    originator: Optional[OriginatorDTO] = Field(default=None)

    action: StoreCreditAction = Field(
        default=StoreCreditAction.ALLOCATION,
        description="Action recorded on the creation event"
    )

    action_authorization_code: Optional[str] = Field(
        default=None,
        description="Authorization code for the creation event (generated when omitted)"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": 42,
                "created_by_id": 1,
                "category_id": 3,
                "amount": "100.00",
                "currency": "USD",
                "memo": "Exchange for order R123456789"
            }
        }
    )

    def originator_domain(self) -> Optional[Originator]:
        return _originator(self.originator)


class AuthorizeCommandDTO(BaseModel):
    """
    Command DTO for holding store credit

    An authorization_code of an earlier authorization makes the call a no-op.
    """

    store_credit_id: int = Field(...)

    amount: Decimal = Field(..., gt=0, description="Amount to hold")

    currency: str = Field(..., min_length=3, max_length=3)

    originator: Optional[OriginatorDTO] = Field(default=None)

    authorization_code: Optional[str] = Field(
        default=None,
        description="Code of an existing authorization (idempotent retry)"
    )

    def originator_domain(self) -> Optional[Originator]:
        return _originator(self.originator)


class CaptureCommandDTO(BaseModel):
    store_credit_id: int = Field(...)

    amount: Decimal = Field(..., gt=0, description="Amount to capture from the hold")

    authorization_code: str = Field(..., description="Code returned by authorize")

    currency: str = Field(..., min_length=3, max_length=3)

    originator: Optional[OriginatorDTO] = Field(default=None)

    def originator_domain(self) -> Optional[Originator]:
        return _originator(self.originator)


class VoidCommandDTO(BaseModel):
    store_credit_id: int = Field(...)

    authorization_code: str = Field(..., description="Code returned by authorize")

    originator: Optional[OriginatorDTO] = Field(default=None)

    def originator_domain(self) -> Optional[Originator]:
        return _originator(self.originator)


class CreditCommandDTO(BaseModel):
    """
    Command DTO for giving back captured store credit

    credit_to_new_allocation decides whether the amount is returned to the
    original store credit or issued as a new one. None falls back to the
    use case's configured default.
    """

    store_credit_id: int = Field(...)

    amount: Decimal = Field(..., gt=0, description="Amount to credit back")

    authorization_code: str = Field(..., description="Code of the capture being credited")

    currency: str = Field(..., min_length=3, max_length=3)

    originator: Optional[OriginatorDTO] = Field(default=None)

    credit_to_new_allocation: Optional[bool] = Field(default=None)

    def originator_domain(self) -> Optional[Originator]:
        return _originator(self.originator)


class StoreCreditResponseDTO(BaseModel):
    """Snapshot of a store credit ledger"""

    id: int
    user_id: int
    created_by_id: int
    category_id: int
    type_id: Optional[int] = None
    currency: str
    amount: Decimal
    amount_used: Decimal
    amount_authorized: Decimal
    amount_remaining: Decimal
    memo: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, store_credit: StoreCredit) -> "StoreCreditResponseDTO":
        return cls(
            id=store_credit.id,
            user_id=store_credit.user_id,
            created_by_id=store_credit.created_by_id,
            category_id=store_credit.category_id,
            type_id=store_credit.type_id,
            currency=store_credit.currency,
            amount=store_credit.amount,
            amount_used=store_credit.amount_used,
            amount_authorized=store_credit.amount_authorized,
            amount_remaining=store_credit.amount_remaining(),
            memo=store_credit.memo,
            created_at=store_credit.created_at,
        )


class StoreCreditEventDTO(BaseModel):
    id: int
    store_credit_id: int
    action: str
    amount: Decimal
    user_total_amount: Decimal
    authorization_code: str
    originator_type: Optional[str] = None
    originator_id: Optional[str] = None
    display_action: str
    display_event_date: str
    created_at: datetime

    @classmethod
    def from_entity(cls, event: StoreCreditEvent) -> "StoreCreditEventDTO":
        return cls(
            id=event.id,
            store_credit_id=event.store_credit_id,
            action=StoreCreditAction(event.action).value,
            amount=event.amount,
            user_total_amount=event.user_total_amount,
            authorization_code=event.authorization_code,
            originator_type=event.originator_type,
            originator_id=event.originator_id,
            display_action=event.display_action,
            display_event_date=event.display_event_date,
            created_at=event.created_at,
        )


class StoreCreditOperationResponseDTO(BaseModel):
    """
    Response DTO for ledger operations

    store_credit is the ledger the event was appended to. For a credit to
    a new allocation that is the newly created store credit.
    """

    store_credit: StoreCreditResponseDTO
    event: StoreCreditEventDTO

    @classmethod
    def build(cls, store_credit: StoreCredit, event: StoreCreditEvent) -> "StoreCreditOperationResponseDTO":
        return cls(
            store_credit=StoreCreditResponseDTO.from_entity(store_credit),
            event=StoreCreditEventDTO.from_entity(event),
        )


class ListStoreCreditEventsResponseDTO(BaseModel):
    events: List[StoreCreditEventDTO]
    total: int
    limit: int
    offset: int


class PaymentActionsResponseDTO(BaseModel):
    """Which store credit actions a payment currently allows"""

    store_credit_id: int
    payment_id: int
    payment_state: str
    can_capture: bool
    can_void: bool
    can_credit: bool


class EventOrderDTO(BaseModel):
    """Order resolved from an event's authorization code"""

    order_id: int
    number: str
    payment_state: Optional[str] = None
    payment_id: int


class StoreCreditDiscrepancyDTO(BaseModel):
    """Ledger whose stored balances disagree with its event history"""

    store_credit_id: int
    user_id: int
    amount_used: Decimal
    expected_amount_used: Decimal
    amount_authorized: Decimal
    expected_amount_authorized: Decimal


class ReconciliationResultDTO(BaseModel):
    total_store_credits_checked: int = Field(..., description="Number of store credits checked")
    discrepancies_found: int = Field(..., description="Number of discrepancies found")
    discrepancies: List[StoreCreditDiscrepancyDTO] = Field(default_factory=list)
    reconciliation_time: datetime = Field(..., description="When reconciliation started")
    execution_time_ms: int = Field(..., description="Execution time in milliseconds")
