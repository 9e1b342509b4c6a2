"""Store Credit Type Domain Entity

Credit types control expiry and the order in which credits are used.
"""

from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import Integer, String
from src.domain.base import BaseModel, IdType

EXPIRING_TYPE_NAME = "Expiring"
NON_EXPIRING_TYPE_NAME = "Non-expiring"


class StoreCreditType(BaseModel, table=True):
    """
    Store Credit Type

    Two types are expected to exist: "Expiring" (the default) and
    "Non-expiring" (assigned to credits of non-expiring categories).
    Lower priority is consumed first.
    """

    __tablename__ = "store_credit_types"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    name: str = Field(
        sa_column=Column(String(100), unique=True, nullable=False),
        description="Type name"
    )

    priority: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False, default=1),
        description="Consumption priority (lower first)"
    )


def default_type_name(non_expiring_category: bool) -> str:
    return NON_EXPIRING_TYPE_NAME if non_expiring_category else EXPIRING_TYPE_NAME
