"""Store Credit Event Domain Entity

Immutable append-only audit trail of every balance-affecting action on a
store credit. The authorization_code links an authorize event to its
capture or void, and a capture event to its credits.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, BigInteger, Numeric, String
from src.domain.base import BaseModel, IdType


class StoreCreditAction(str, Enum):
    """Store credit event actions"""
    ALLOCATION = "allocation"  # Credit issued
    AUTHORIZE = "authorize"    # Amount held for a payment
    CAPTURE = "capture"        # Held amount used
    VOID = "void"              # Held amount released
    CREDIT = "credit"          # Captured amount given back


DISPLAY_ACTIONS = {
    StoreCreditAction.CAPTURE: "captured",
    StoreCreditAction.AUTHORIZE: "authorized",
    StoreCreditAction.ALLOCATION: "allocated",
    StoreCreditAction.VOID: "credit",
    StoreCreditAction.CREDIT: "credit",
}

EVENT_DATE_FORMAT = "%m/%d/%Y"


class StoreCreditEvent(BaseModel, table=True):
    """
    Store Credit Event - Immutable audit record

    Domain Rules:
    - Events are immutable (append-only)
    - Every successful ledger mutation appends exactly one event
    - user_total_amount snapshots the user's total credited amount
    - originator is a weak reference (type + id) to whatever caused the event
    """

    __tablename__ = "store_credit_events"
    __table_args__ = (
        Index('ix_store_credit_events_auth_code', 'store_credit_id', 'authorization_code'),
        Index('ix_store_credit_events_created_at', 'created_at'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique event identifier (auto-increment)"
    )

    store_credit_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("store_credits.id"), nullable=False),
        description="Foreign key to StoreCredit"
    )

    action: StoreCreditAction = Field(
        description="allocation, authorize, capture, void or credit"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Amount moved by this event"
    )

    user_total_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
        description="User's total store credit at event time"
    )

    authorization_code: str = Field(
        sa_column=Column(String(255), nullable=False, index=True),
        description="Correlates authorize/capture/void/credit events"
    )

    originator_type: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
    )

    originator_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Event timestamp (immutable)"
    )

    @property
    def display_action(self) -> str:
        return DISPLAY_ACTIONS[StoreCreditAction(self.action)]

    @property
    def display_event_date(self) -> str:
        return self.created_at.strftime(EVENT_DATE_FORMAT)


class Originator(BaseModel):
    """Weak reference to the actor that caused an event"""

    type: str
    id: str
