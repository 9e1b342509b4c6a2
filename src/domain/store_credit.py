"""Store Credit Domain Entity

A store credit is a ledger for one issuance of credit to a user. It tracks
the credited amount, the amount currently held by authorizations and the
amount already used. Balances only change through StoreCreditEvents.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, BigInteger, DateTime, Numeric, String
from src.domain.base import BaseModel, IdType
from src.domain.errors import StoreCreditErrorCode
from src.domain.payment import Order, Payment, PaymentState, OrderPaymentState

ZERO = Decimal("0")

AUTHORIZATION_CODE_INFIX = "SC"


def to_decimal(value: Union[Decimal, float, int, str, None]) -> Decimal:
    """
    Convert a monetary value to Decimal without binary float artifacts

    Floats go through str() so that 8.21 becomes Decimal("8.21") rather
    than Decimal("8.2099999999999990762944435118697583675384521484375").
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class StoreCredit(BaseModel, table=True):
    """
    Store Credit - Ledger for a single credit issuance

    Domain Rules:
    - amount is set on creation and never changes
    - amount_used <= amount
    - amount_authorized <= amount
    - amount_remaining = amount - amount_used - amount_authorized
    - Operations in a different currency are rejected
    - Cannot be deleted once any amount has been used
    """

    __tablename__ = "store_credits"
    __table_args__ = (
        CheckConstraint('amount_used >= 0', name='amount_used_non_negative'),
        CheckConstraint('amount_authorized >= 0', name='amount_authorized_non_negative'),
        Index('ix_store_credits_user_deleted', 'user_id', 'deleted_at'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique store credit identifier (auto-increment)"
    )

    user_id: int = Field(
        sa_column=Column(BigInteger, nullable=False, index=True),
        description="User owning the credit"
    )

    created_by_id: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Admin user who issued the credit"
    )

    category_id: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="StoreCreditCategory id"
    )

    type_id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger, nullable=True),
        description="StoreCreditType id (derived from category when not given)"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Total credited amount (immutable)"
    )

    amount_used: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
        description="Amount captured against this credit"
    )

    amount_authorized: Decimal = Field(
        default=ZERO,
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
        description="Amount currently held by authorizations"
    )

    currency: str = Field(
        sa_column=Column(String(3), nullable=False),
        description="ISO currency code"
    )

    memo: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    deleted_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime, nullable=True),
        description="Soft delete timestamp"
    )

    def amount_remaining(self) -> Decimal:
        return to_decimal(self.amount) - to_decimal(self.amount_used) - to_decimal(self.amount_authorized)

    def validation_errors(self) -> List[StoreCreditErrorCode]:
        """Structural invariants checked before every persist"""
        return validate_amounts(self.amount, self.amount_used, self.amount_authorized)

    def is_valid(self) -> bool:
        return not self.validation_errors()

    def authorization_error(self, amount, currency: str) -> Optional[StoreCreditErrorCode]:
        """
        Pre-flight check shared by authorize and validate_authorization

        Returns:
            The error code that would reject the authorization, None if it is allowed
        """
        if currency != self.currency:
            return StoreCreditErrorCode.CURRENCY_MISMATCH
        if to_decimal(amount) > self.amount_remaining():
            return StoreCreditErrorCode.INSUFFICIENT_FUNDS
        return None

    def destroy_error(self) -> Optional[StoreCreditErrorCode]:
        if to_decimal(self.amount_used) > ZERO:
            return StoreCreditErrorCode.AMOUNT_USED_NOT_ZERO
        return None

    def generate_authorization_code(self, now: Optional[datetime] = None) -> str:
        """Code format: <store_credit_id>-SC-<UTC timestamp with microseconds>"""
        now = now or datetime.utcnow()
        return f"{self.id}-{AUTHORIZATION_CODE_INFIX}-{now.strftime('%Y%m%d%H%M%S%f')}"

    def can_capture(self, payment: Payment) -> bool:
        return payment.state in (PaymentState.PENDING, PaymentState.CHECKOUT)

    def can_void(self, payment: Payment) -> bool:
        # Checkout payments are capturable but not voidable
        return payment.state == PaymentState.PENDING

    def can_credit(self, payment: Payment, order: Optional[Order]) -> bool:
        if payment.state != PaymentState.COMPLETED:
            return False
        if order is None or order.payment_state != OrderPaymentState.CREDIT_OWED:
            return False
        return payment.credit_allowed != ZERO


def validate_amounts(amount, amount_used, amount_authorized) -> List[StoreCreditErrorCode]:
    errors = []
    amount = to_decimal(amount)
    if to_decimal(amount_used) > amount:
        errors.append(StoreCreditErrorCode.AMOUNT_USED_CANNOT_BE_GREATER)
    if to_decimal(amount_authorized) > amount:
        errors.append(StoreCreditErrorCode.AMOUNT_AUTHORIZED_EXCEEDS_TOTAL_CREDIT)
    return errors
