from .store_credit_repository import SqlAlchemyStoreCreditRepository
from .store_credit_event_repository import SqlAlchemyStoreCreditEventRepository
from .store_credit_category_repository import (
    SqlAlchemyStoreCreditCategoryRepository,
    SqlAlchemyStoreCreditTypeRepository,
)
from .payment_repository import SqlAlchemyPaymentRepository

__all__ = [
    "SqlAlchemyStoreCreditRepository",
    "SqlAlchemyStoreCreditEventRepository",
    "SqlAlchemyStoreCreditCategoryRepository",
    "SqlAlchemyStoreCreditTypeRepository",
    "SqlAlchemyPaymentRepository",
]
