"""Store Credit Category Domain Entity

Classifies why store credit was issued (e.g. "Gift Card", "Exchange").
The category decides the default credit type of a new store credit.
"""

from datetime import datetime
from typing import Iterable, Optional
from sqlmodel import Field, Column
from sqlalchemy import String
from src.domain.base import BaseModel, IdType


class StoreCreditCategory(BaseModel, table=True):
    """
    Store Credit Category

    Domain Rules:
    - Name is unique
    - A category is non-expiring when its name is configured as such
    """

    __tablename__ = "store_credit_categories"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    name: str = Field(
        sa_column=Column(String(100), unique=True, nullable=False),
        description="Category name"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    def is_non_expiring(self, non_expiring_names: Iterable[str]) -> bool:
        return self.name in set(non_expiring_names)
