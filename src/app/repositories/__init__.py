from .store_credit_repository import StoreCreditRepository
from .store_credit_event_repository import StoreCreditEventRepository
from .store_credit_category_repository import StoreCreditCategoryRepository, StoreCreditTypeRepository
from .payment_repository import PaymentRepository

__all__ = [
    "StoreCreditRepository",
    "StoreCreditEventRepository",
    "StoreCreditCategoryRepository",
    "StoreCreditTypeRepository",
    "PaymentRepository",
]
