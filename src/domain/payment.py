"""Payment and Order read models

Owned by the order platform. The store credit service only reads them to
resolve an authorization code to a payment (payment.response_code) and to
decide which actions the payment allows.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, Numeric, String
from src.domain.base import BaseModel, IdType


class PaymentState(str, Enum):
    """Payment states relevant to store credit"""
    CHECKOUT = "checkout"
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    VOID = "void"
    INVALID = "invalid"


class OrderPaymentState(str, Enum):
    BALANCE_DUE = "balance_due"
    CREDIT_OWED = "credit_owed"
    PAID = "paid"
    VOID = "void"
    FAILED = "failed"


class Order(BaseModel, table=True):
    __tablename__ = "orders"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    number: str = Field(sa_column=Column(String(32), unique=True, nullable=False))

    payment_state: Optional[str] = Field(
        default=None,
        sa_column=Column(String(32), nullable=True),
    )


class Payment(BaseModel, table=True):
    """
    Payment against an order

    response_code holds the gateway's authorization code; for store credit
    payments it is the StoreCreditEvent authorization_code.
    """

    __tablename__ = "payments"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    order_id: int = Field(sa_column=Column(BigInteger, nullable=False, index=True))

    response_code: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True, index=True),
    )

    state: str = Field(
        default=PaymentState.CHECKOUT.value,
        sa_column=Column(String(32), nullable=False),
    )

    amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
    )

    credited_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
        description="Sum of refunds/offsets already issued against this payment"
    )

    @property
    def credit_allowed(self) -> Decimal:
        return (self.amount or Decimal("0")) - (self.credited_amount or Decimal("0"))
